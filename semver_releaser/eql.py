"""
Parse and serialize EQL, the flat key=value configuration language.

This module:
- Scans strings such as ``fix=patch feat="minor" bang='major'`` into dicts
- Supports single/double quoted values with delimiter-only escaping
- Serializes dicts back into EQL text that parses to the same mapping

The scanner is a small state machine. Its state lives in an explicit
``ScanState`` value that is threaded through ``step()``, so parsing is
reentrant and each transition can be exercised on its own.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

QUOTE_CHARS = ('"', "'")


class ConfigSyntaxError(ValueError):
    """Raised when an EQL string is malformed."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class Mode(Enum):
    """Scanner modes."""
    KEY = 'key'
    VALUE = 'value'
    QUOTE = 'quote'


@dataclass
class ScanState:
    """Scanner state carried from one character to the next."""
    mode: Mode = Mode.KEY
    key: List[str] = field(default_factory=list)
    value: List[str] = field(default_factory=list)
    delimiter: str = ''
    escaping: bool = False


def _commit(state: ScanState, result: Dict[str, str]) -> ScanState:
    key = ''.join(state.key).strip()
    result[key] = ''.join(state.value).strip()
    return ScanState()


def step(state: ScanState, char: str, position: int, result: Dict[str, str]) -> ScanState:
    """
    Advance the scanner by one character.

    Args:
        state: Current scanner state
        char: Character being consumed
        position: 1-based position of ``char`` in the input
        result: Mapping receiving committed pairs

    Returns:
        The state to use for the next character

    Raises:
        ConfigSyntaxError: If ``=`` appears with no pending key
    """
    if state.mode is Mode.KEY:
        if char == ' ' and not state.key:
            return state
        if char == '=':
            if not state.key:
                raise ConfigSyntaxError(f"unexpected '=' at position {position}", position)
            state.mode = Mode.VALUE
            return state
        state.key.append(char)
        return state

    if state.mode is Mode.VALUE:
        if not state.value:
            if char == ' ':
                return state
            if char in QUOTE_CHARS:
                state.mode = Mode.QUOTE
                state.delimiter = char
                return state
        if char == ' ':
            return _commit(state, result)
        state.value.append(char)
        return state

    # Mode.QUOTE
    if char == '\\':
        state.escaping = True
        return state
    if state.escaping:
        if char != state.delimiter:
            state.value.append('\\')
        state.value.append(char)
        state.escaping = False
        return state
    if char == state.delimiter:
        return _commit(state, result)
    state.value.append(char)
    return state


def parse(text: str) -> Dict[str, str]:
    """
    Parse an EQL string into a mapping.

    Duplicate keys overwrite earlier ones. A trailing key without ``=`` is
    ignored.

    Args:
        text: EQL input, e.g. ``fix=patch feat=minor``

    Returns:
        Dictionary of trimmed keys to trimmed values, in declaration order

    Raises:
        ConfigSyntaxError: On a stray ``=`` or an unterminated quoted string
    """
    result: Dict[str, str] = {}
    state = ScanState()

    for position, char in enumerate(text, start=1):
        state = step(state, char, position, result)

    if state.mode is Mode.QUOTE:
        raise ConfigSyntaxError("unterminated quoted string")

    if state.mode is Mode.VALUE:
        _commit(state, result)

    return result


def _format_value(value: str) -> str:
    needs_quotes = not value or ' ' in value or value[0] in QUOTE_CHARS
    if not needs_quotes:
        return value

    # A backslash right before the delimiter always reads as an escape, so
    # pick the delimiter that never follows a backslash in this value.
    delimiter = "'" if '\\"' in value else '"'
    quoted = value.replace(delimiter, '\\' + delimiter)
    if quoted.endswith('\\'):
        # Padding is trimmed on parse and keeps the delimiter unescaped.
        quoted += ' '
    return delimiter + quoted + delimiter


def dump(mapping: Dict[str, str]) -> str:
    """
    Serialize a mapping into EQL.

    Args:
        mapping: Keys and values to serialize

    Returns:
        EQL string; ``parse(dump(parse(s)))`` equals ``parse(s)``
    """
    return ' '.join(f"{key}={_format_value(value)}" for key, value in mapping.items())
