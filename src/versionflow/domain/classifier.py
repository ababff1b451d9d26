"""
Version classifier: total ordering of versions.

Static versions sort before dynamic ones. Static identifiers are compared
token by token, numeric tokens as integers, so that ``1.10`` sorts after
``1.2``, and ``.`` separators rank above ``-`` separators so that ``1.2-3``
(a pre-release style suffix) sorts before ``1.2.3``.
"""

import functools
import re
from collections.abc import Callable, Iterable
from typing import Any

from versionflow.domain.models import Version

# Zero-width split around separators keeps the separators as their own tokens
_TOKEN_SPLIT = re.compile(r"(?<=[.-])|(?=[.-])")
_SEPARATORS = (".", "-")


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_strings(string1: str, string2: str) -> int:
    return (string1 > string2) - (string1 < string2)


def _compare_tokens(token1: str, token2: str) -> int:
    if token1.isdecimal() and token2.isdecimal():
        return _sign(int(token1) - int(token2))
    return _compare_strings(token1, token2)


def _tokenize(identifier: str) -> list[str]:
    return [token for token in _TOKEN_SPLIT.split(identifier) if token]


def _separator_rank(token: str | None) -> int:
    """Rank of what follows a data token: '-' < end of string < '.'."""
    if token == "-":
        return 0
    if token is None:
        return 1
    return 2


class VersionClassifier:
    """
    Orders versions.

    Args:
        static_version_prefix: Optional prefix carried by the module's static
            versions (e.g. ``"v"``). Versions having it sort before versions
            that do not.
    """

    def __init__(self, static_version_prefix: str | None = None):
        self._prefix = static_version_prefix or None

    @property
    def static_version_prefix(self) -> str | None:
        return self._prefix

    def compare(self, version1: Version, version2: Version) -> int:
        """
        Compare two versions.

        Returns:
            -1, 0 or 1 as version1 is less than, equal to or greater than version2
        """
        if version1 == version2:
            return 0

        if version1.kind is not version2.kind:
            return -1 if version1.is_static else 1

        if version1.is_dynamic:
            return _compare_strings(version1.identifier, version2.identifier)

        return self._compare_static(version1.identifier, version2.identifier)

    def _compare_static(self, identifier1: str, identifier2: str) -> int:
        if self._prefix is not None:
            has1 = identifier1.startswith(self._prefix)
            has2 = identifier2.startswith(self._prefix)

            if has1 and not has2:
                return -1
            if has2 and not has1:
                return 1
            if not has1:
                return _compare_strings(identifier1, identifier2)

            identifier1 = identifier1[len(self._prefix) :]
            identifier2 = identifier2[len(self._prefix) :]

        return self._compare_token_sequences(
            _tokenize(identifier1), _tokenize(identifier2)
        )

    def _compare_token_sequences(self, tokens1: list[str], tokens2: list[str]) -> int:
        index = 0
        while True:
            if index >= len(tokens1) or index >= len(tokens2):
                # Shorter sequence is smaller, both exhausted together is a tie
                return _sign(len(tokens1) - len(tokens2))

            token1 = tokens1[index]
            token2 = tokens2[index]
            is_separator1 = token1 in _SEPARATORS
            is_separator2 = token2 in _SEPARATORS

            if is_separator1 or is_separator2:
                # A separator facing a data token ("1..1" vs "1.1"): the
                # separator side has one more component at this level.
                if is_separator1 != is_separator2:
                    return 1 if is_separator1 else -1
                result = _sign(_separator_rank(token1) - _separator_rank(token2))
                if result != 0:
                    return result
                index += 1
                continue

            result = _compare_tokens(token1, token2)
            if result != 0:
                return result

            following1 = tokens1[index + 1] if index + 1 < len(tokens1) else None
            following2 = tokens2[index + 1] if index + 1 < len(tokens2) else None
            result = _sign(_separator_rank(following1) - _separator_rank(following2))
            if result != 0:
                return result
            if following1 is None:
                return 0

            # Same separator follows both data tokens
            index += 2

    def sort_key(self) -> Callable[[Version], Any]:
        """Key function for ``sorted``/``list.sort``."""
        return functools.cmp_to_key(self.compare)

    def sorted(self, versions: Iterable[Version], reverse: bool = False) -> list[Version]:
        """Sort versions, oldest first (most recent first with ``reverse=True``)."""
        return sorted(versions, key=self.sort_key(), reverse=reverse)
