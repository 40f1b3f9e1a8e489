r"""
Token classifier: decide whether a raw command-line token names a parameter.

Grammar
- a single leading '-' marker,
- a first name character that is a letter, '_' or '?',
- any further characters except  { } ( ) ; , | & . [ :  and whitespace,
- an optional trailing ':' (used by switches as in '-Verbose: False').

Examples
- "-TaskName"   → ParameterToken(name="TaskName", colon=False)
- "-Verbose:"   → ParameterToken(name="Verbose", colon=True)
- "-1", "--all", "build", "-a.b" → not parameter tokens (positional candidates)
"""
import re
from typing import NamedTuple

_PATTERN = re.compile(r"-(?P<name>(?:[^\W\d_]|[_?])[^{}();,|&.\[:\s]*)(?P<colon>:?)")


class ParameterToken(NamedTuple):
    name: str
    colon: bool


def classify(token, /):
    """
    return a ParameterToken for a parameter-name token, otherwise None.
    """
    if not isinstance(token, str):
        raise TypeError("classify() argument must be a string")
    if match := _PATTERN.fullmatch(token):
        return ParameterToken(match["name"], bool(match["colon"]))
    return None


def is_parameter_token(token, /):
    """
    return (True, name) when the token names a parameter, else (False, None).
    """
    if parameter := classify(token):
        return True, parameter.name
    return False, None


__all__ = (
    "ParameterToken",
    "classify",
    "is_parameter_token",
)
