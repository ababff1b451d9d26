"""
Operator interaction adapters.

ConsoleInteraction talks to a human on the terminal; ScriptedInteraction
replays prepared answers (automation and tests).
"""

import logging
import threading
from collections.abc import Iterable
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from versionflow.domain.interfaces import InteractionInterface

logger = logging.getLogger(__name__)


class _AnswerPrompt(Prompt):
    # Questions carry their own "? " ending
    prompt_suffix = ""


class ConsoleInteraction(InteractionInterface):
    """
    Blocking terminal prompts.

    Prompts from concurrent traversals are serialized so that a question and
    its answer are never interleaved with another thread's output.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None):
        """
        Args:
            console: Rich console to use (a new one by default)
            stream: Input to read answers from (stdin by default)
        """
        self.console = console or Console()
        self._stream = stream
        self._lock = threading.Lock()

    def ask(self, prompt: str) -> str:
        with self._lock:
            answer = _AnswerPrompt.ask(
                escape(prompt), console=self.console, stream=self._stream
            )
        return answer.strip()

    def ask_with_default(self, prompt: str, default: str) -> str:
        with self._lock:
            answer = _AnswerPrompt.ask(
                escape(prompt),
                console=self.console,
                default=default,
                show_default=False,
                stream=self._stream,
            )
        return answer.strip() or default

    def inform(self, message: str) -> None:
        with self._lock:
            self.console.print(f"[bold cyan]>[/bold cyan] {escape(message)}")


class ScriptedInteraction(InteractionInterface):
    """
    Replays a fixed list of answers.

    An empty answer means the default for ``ask_with_default``. Prompts and
    messages are recorded for inspection. Running out of answers raises
    RuntimeError so that an unexpected question never blocks.
    """

    def __init__(self, answers: Iterable[str] = ()):
        self._answers = list(answers)
        self._lock = threading.Lock()
        self.prompts: list[str] = []
        self.messages: list[str] = []

    def add_answers(self, *answers: str) -> None:
        with self._lock:
            self._answers.extend(answers)

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def _next_answer(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
            if not self._answers:
                raise RuntimeError(f"No scripted answer left for prompt: {prompt}")
            answer = self._answers.pop(0)
        logger.debug("Scripted answer %r for %r", answer, prompt)
        return answer

    def ask(self, prompt: str) -> str:
        return self._next_answer(prompt)

    def ask_with_default(self, prompt: str, default: str) -> str:
        return self._next_answer(prompt) or default

    def inform(self, message: str) -> None:
        with self._lock:
            self.messages.append(message)
