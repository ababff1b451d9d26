"""
Decision memory: ask the operator once, remember the answer.

Every "reuse what the operator answered for the previous module" decision in
the selection strategies and the capability resolver goes through
``DecisionMemory.resolve``. Policies and remembered values are stored as
runtime properties:

    CAN_REUSE_<key>   ALWAYS | NEVER | ASK (missing means ASK)
    REUSE_<key>       the remembered value

Remembered values and policies are written to the global scope so that they
apply to every subsequent module of the run.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from versionflow.application.collaborators import CheckedInteraction
from versionflow.domain.exceptions import UserConfigurationError
from versionflow.domain.interfaces import (
    InteractionInterface,
    RuntimePropertiesInterface,
    ScmInterface,
)
from versionflow.domain.models import (
    AlwaysNeverYesNoResponse,
    NodePath,
    ReusePolicy,
    Version,
    VersionKind,
    YesAlwaysNoResponse,
    YesNoResponse,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

PROPERTY_IND_NO_CONFIRM = "IND_NO_CONFIRM"

# Shorthand answers accepted in addition to the enum values
_ALIASES: dict[str, str] = {
    "1": "ALWAYS",
    "0": "NEVER",
    "Y": "YES",
    "N": "NO",
}

_CHOICES: dict[type[Enum], str] = {
    YesNoResponse: "YES/NO",
    YesAlwaysNoResponse: "YES/ALWAYS/NO",
    ReusePolicy: "ALWAYS/NEVER/ASK",
    AlwaysNeverYesNoResponse: "ALWAYS/NEVER/YES/NO",
}


def is_true(value: str | None) -> bool:
    """Whether a property value is the string ``true`` (case-insensitive)."""
    return value is not None and value.strip().lower() == "true"


def format_prompt(prompt: str, choices: str | None, default: str | None) -> str:
    """
    Complete a prompt ending with ``*`` with its choices and default.

    ``"Continue*"`` becomes ``"Continue (YES/NO) [YES]? "``.
    """
    if not prompt.endswith("*"):
        return prompt
    prompt = prompt[:-1]
    if choices:
        prompt += f" ({choices})"
    if default:
        prompt += f" [{default}]"
    return prompt + "? "


class DecisionMemory:
    """
    Generic memoized-decision primitive plus the interactive helpers it uses.

    Args:
        properties: Runtime properties holding policies and remembered values
        interaction: Operator interaction
    """

    def __init__(
        self,
        properties: RuntimePropertiesInterface,
        interaction: InteractionInterface,
    ):
        self._properties = properties
        self._interaction = CheckedInteraction(interaction)

    @property
    def properties(self) -> RuntimePropertiesInterface:
        return self._properties

    @property
    def interaction(self) -> InteractionInterface:
        return self._interaction

    # -------------------------------------------------------------------------
    # Generic answers
    # -------------------------------------------------------------------------

    def ask_choice(self, prompt: str, response_type: type[E], default: E) -> E:
        """
        Ask until the answer is one of the values of ``response_type``.

        Answers are case-insensitive; ``1``/``0``/``Y``/``N`` are accepted as
        shorthands for ALWAYS/NEVER/YES/NO. For a ReusePolicy, YES means ASK.
        """
        prompt = format_prompt(prompt, _CHOICES.get(response_type), default.value)

        while True:
            answer = self._interaction.ask_with_default(prompt, default.value)
            normalized = answer.strip().upper()
            normalized = _ALIASES.get(normalized, normalized)
            if response_type is ReusePolicy and normalized == "YES":
                normalized = ReusePolicy.ASK.value
            try:
                return response_type(normalized)
            except ValueError:
                self._interaction.inform(f"Invalid response '{answer}'. Please try again.")

    def ask_yes_no(self, prompt: str, default: bool = True) -> bool:
        response = self.ask_choice(
            prompt, YesNoResponse, YesNoResponse.YES if default else YesNoResponse.NO
        )
        return response is YesNoResponse.YES

    def ask_version(
        self,
        prompt: str,
        kind: VersionKind | None = None,
        scm: ScmInterface | None = None,
        default: Version | None = None,
    ) -> Version:
        """
        Ask for a version until the answer is valid.

        Args:
            prompt: Question (a trailing ``*`` appends the default)
            kind: Required version kind, if any
            scm: When given, the version must exist in it
            default: Version used for an empty answer
        """
        prompt = format_prompt(prompt, None, str(default) if default else None)

        while True:
            if default is None:
                answer = self._interaction.ask(prompt)
            else:
                answer = self._interaction.ask_with_default(prompt, str(default))

            try:
                version = Version.parse(answer)
            except UserConfigurationError as e:
                self._interaction.inform(str(e))
                continue

            if kind is not None and version.kind is not kind:
                self._interaction.inform(
                    f"Version {version} must be {kind.name.lower()}. Please try again."
                )
                continue

            if scm is not None and not scm.is_version_exists(version):
                self._interaction.inform(
                    f"Version {version} does not exist. Please try again."
                )
                continue

            return version

    # -------------------------------------------------------------------------
    # Policies
    # -------------------------------------------------------------------------

    def get_policy(self, scope: NodePath | None, name: str) -> ReusePolicy:
        """Read a policy property; missing or unknown values mean ASK."""
        value = self._properties.get_property(scope, name)
        if value is None:
            return ReusePolicy.ASK
        try:
            return ReusePolicy(value.strip().upper())
        except ValueError:
            logger.warning("Ignoring invalid value '%s' for property %s", value, name)
            return ReusePolicy.ASK

    def handle_policy_ask(
        self, name: str, prompt: str, default: ReusePolicy = ReusePolicy.ASK
    ) -> ReusePolicy:
        """
        Ask whether a decision should be remembered, unless already settled.

        The global policy ``name`` is returned as is when ALWAYS or NEVER.
        Otherwise the operator is asked and a non-ASK answer is persisted.
        """
        policy = self.get_policy(None, name)
        if policy is ReusePolicy.ASK:
            policy = self.ask_choice(prompt, ReusePolicy, default)
            if policy is not ReusePolicy.ASK:
                self._properties.set_property(None, name, policy.value)
        return policy

    def handle_yes_no_ask(
        self,
        name: str,
        prompt: str,
        default: AlwaysNeverYesNoResponse = AlwaysNeverYesNoResponse.YES,
    ) -> AlwaysNeverYesNoResponse:
        """
        Yes/no question whose answer may be remembered.

        The global property ``name`` holds the last answer. ALWAYS and NEVER
        are returned without asking; YES and NO are used as the default of the
        question, and a changed answer is persisted.
        """
        stored = self._properties.get_property(None, name)
        try:
            current = AlwaysNeverYesNoResponse(stored.strip().upper()) if stored else default
        except ValueError:
            current = default

        if current in (AlwaysNeverYesNoResponse.ALWAYS, AlwaysNeverYesNoResponse.NEVER):
            return current

        answer = self.ask_choice(prompt, AlwaysNeverYesNoResponse, current)
        if answer is not current:
            self._properties.set_property(None, name, answer.value)
        return answer

    # -------------------------------------------------------------------------
    # Memoized decisions
    # -------------------------------------------------------------------------

    def resolve(
        self,
        scope: NodePath | None,
        key: str,
        policy: ReusePolicy | None,
        derive: Callable[[str | None], str],
        reuse_prompt: str,
        reused_message: str | None = None,
    ) -> str:
        """
        Return a remembered value or derive (and remember) a new one.

        Args:
            scope: Node whose properties are consulted (None for global)
            key: Decision key; properties ``CAN_REUSE_<key>``/``REUSE_<key>``
            policy: Policy to apply; None reads ``CAN_REUSE_<key>``
            derive: Called with the remembered value (or None) when the value
                cannot be reused automatically; typically prompts the operator
                using it as the default
            reuse_prompt: Question asking whether to reuse the derived value
                automatically; ``{value}`` is replaced by it
            reused_message: Information given when the remembered value is
                reused automatically; ``{value}`` is replaced by it

        Returns:
            The remembered or derived value
        """
        can_reuse_name = f"CAN_REUSE_{key}"
        reuse_name = f"REUSE_{key}"

        if policy is None:
            policy = self.get_policy(scope, can_reuse_name)
        remembered = self._properties.get_property(scope, reuse_name)

        # ALWAYS with nothing remembered yet behaves as ASK
        if policy is ReusePolicy.ALWAYS and remembered is not None:
            logger.info("Automatically reusing %s=%s for %s", key, remembered, scope)
            if reused_message:
                self._interaction.inform(reused_message.format(value=remembered))
            return remembered

        value = derive(remembered)
        self._properties.set_property(None, reuse_name, value)
        self.handle_policy_ask(
            can_reuse_name, reuse_prompt.format(value=value), ReusePolicy.ALWAYS
        )
        return value

    def decide(
        self,
        scope: NodePath | None,
        key: str,
        question: str,
        reuse_prompt: str,
        automatic_message: str | None = None,
    ) -> bool:
        """
        Value-less form of ``resolve``: a yes/no decision under a policy.

        ALWAYS answers yes and NEVER answers no without asking. Otherwise the
        operator answers ``question``, then whether to apply that answer
        automatically from now on.
        """
        name = f"CAN_REUSE_{key}"
        policy = self.get_policy(scope, name)

        if policy is ReusePolicy.NEVER:
            return False
        if policy is ReusePolicy.ALWAYS:
            logger.info("Automatically applying %s for %s", key, scope)
            if automatic_message:
                self._interaction.inform(automatic_message)
            return True

        answer = self.ask_yes_no(question)
        self.handle_policy_ask(name, reuse_prompt, ReusePolicy.ALWAYS)
        return answer

    def confirm_continue(self, context: str) -> bool:
        """
        Ask whether to continue; False means abort.

        ``IND_NO_CONFIRM`` or ``IND_NO_CONFIRM.<context>`` set to true skip the
        question. Answering ALWAYS sets ``IND_NO_CONFIRM.<context>``.
        """
        context_name = f"{PROPERTY_IND_NO_CONFIRM}.{context}"
        if is_true(self._properties.get_property(None, context_name)) or is_true(
            self._properties.get_property(None, PROPERTY_IND_NO_CONFIRM)
        ):
            return True

        response = self.ask_choice(
            "Do you want to continue*", YesAlwaysNoResponse, YesAlwaysNoResponse.YES
        )
        if response is YesAlwaysNoResponse.NO:
            logger.info("Operator chose not to continue (%s)", context)
            return False
        if response is YesAlwaysNoResponse.ALWAYS:
            self._properties.set_property(None, context_name, "true")
        return True
