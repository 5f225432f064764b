"""
ParameterSet: string-keyed parameter bag for projection construction

Built from `key=value` / bare `key` tokens (a leading `+` as in proj strings
is accepted). Keys are case-sensitive as supplied; repeated keys overwrite.

Typed accessors come in two flavours:
- permissive (`integer`, `float`, `radians`): absent key -> default,
  malformed text -> 0 with a logged warning
- strict (`try_integer`, `try_float`, `try_radians`): KeyError when absent,
  ValueError when malformed

A set built with strict=True makes the permissive accessors raise
InvalidParameterCombination on malformed text instead of substituting zero.
Absent keys still fall back to the default in both modes.
"""

from __future__ import annotations

import builtins
import logging
import math
from typing import Iterable, Iterator, Optional

from src.core.errors import InvalidParameterCombination
from src.core.math.angles import parse_dms

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"", "t", "true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"f", "false", "0", "no", "off"})


def _parse_float(text: str) -> builtins.float:
    value = builtins.float(text.strip())
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {text!r}")
    return value


def _parse_int(text: str) -> int:
    return int(text.strip())


class ParameterSet:
    """
    Typed view over raw projection parameters.

    Used only while a projection is being constructed; projections keep the
    values they need, never the set itself.

    Examples:
        >>> params = ParameterSet(["+proj=utm", "zone=33", "south"])
        >>> params.string("proj"), params.integer("zone"), params.boolean("south")
        ('utm', 33, True)
        >>> params.float("missing")
        0.0
    """

    def __init__(self, tokens: Optional[Iterable[str]] = None, strict: bool = False):
        self._values: dict[str, str] = {}
        self._flags: set[str] = set()
        self.strict = strict
        for token in tokens or ():
            self.add(token)

    @classmethod
    def parse(cls, text: str, strict: bool = False) -> ParameterSet:
        """Build a set from a whitespace separated proj string."""
        return cls(text.split(), strict=strict)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add(self, token: str) -> None:
        """
        Add one `key=value` or bare `key` token.

        Raises:
            ValueError: If the token has an empty key
        """
        token = token.strip()
        if token.startswith("+"):
            token = token[1:]
        key, sep, value = token.partition("=")
        key = key.strip()
        if not key:
            raise ValueError(f"parameter token without a key: {token!r}")
        if sep:
            self._values[key] = value.strip()
            self._flags.discard(key)
        else:
            self._values[key] = ""
            self._flags.add(key)

    # -------------------------------------------------------------------------
    # Presence
    # -------------------------------------------------------------------------

    def contains(self, key: str) -> bool:
        return key in self._values

    __contains__ = contains

    def is_flag(self, key: str) -> bool:
        """True if the key was given as a bare token."""
        return key in self._flags

    def keys(self) -> tuple[str, ...]:
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        tokens = " ".join(k if k in self._flags else f"{k}={v}" for k, v in self._values.items())
        return f"ParameterSet({tokens!r})"

    # -------------------------------------------------------------------------
    # Permissive accessors
    # -------------------------------------------------------------------------

    def string(self, key: str) -> Optional[str]:
        """Raw value, "" for a flag, None if absent."""
        return self._values.get(key)

    def integer(self, key: str, default: int = 0) -> int:
        """Integer value; default if absent, 0 if malformed."""
        return self._permissive(key, default, 0, _parse_int)

    def float(self, key: str, default: builtins.float = 0.0) -> builtins.float:
        """Float value; default if absent, 0.0 if malformed."""
        return self._permissive(key, default, 0.0, _parse_float)

    def radians(self, key: str, default: builtins.float = 0.0) -> builtins.float:
        """Angle (DMS text or degrees) in radians; default if absent, 0.0 if malformed."""
        return self._permissive(key, default, 0.0, parse_dms)

    def boolean(self, key: str) -> bool:
        """
        True for a bare flag or a truthy value, False if absent or falsy.

        Unrecognised values count as True (the key is present).
        """
        value = self._values.get(key)
        if value is None:
            return False
        return value.strip().lower() not in _FALSE_VALUES

    # -------------------------------------------------------------------------
    # Strict accessors
    # -------------------------------------------------------------------------

    def try_integer(self, key: str) -> int:
        """
        Raises:
            KeyError: If the key is absent
            ValueError: If the value is not an integer
        """
        return _parse_int(self._values[key])

    def try_float(self, key: str) -> builtins.float:
        """
        Raises:
            KeyError: If the key is absent
            ValueError: If the value is not a finite number
        """
        return _parse_float(self._values[key])

    def try_radians(self, key: str) -> builtins.float:
        """
        Raises:
            KeyError: If the key is absent
            AngleParseError: If the value is not a valid angle
        """
        return parse_dms(self._values[key])

    def try_float_list(self, key: str) -> tuple[builtins.float, ...]:
        """Comma separated numbers, e.g. towgs84=1,2,3."""
        return tuple(_parse_float(part) for part in self._values[key].split(","))

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _permissive(self, key, default, fallback, parser):
        text = self._values.get(key)
        if text is None:
            return default
        try:
            return parser(text)
        except ValueError as exc:
            if self.strict:
                raise InvalidParameterCombination(f"malformed value for {key}: {text!r}") from exc
            logger.warning("Malformed value %r for parameter %s, using %r", text, key, fallback)
            return fallback
