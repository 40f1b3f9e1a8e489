"""
Argument values: the tagged variant every resolution returns.

Variants
- Absent            → no source produced a value (falsy singleton).
- Text(value)       → a textual value (tokens, environment variables, config strings).
- Flag(value)       → a boolean value (switch parameters, config booleans).
- List(values)      → an ordered tuple of strings (config arrays, positional slices).

Conversions
- wrap(object)      → plain Python value to variant (None → Absent, bool → Flag, ...).
- unwrap(value)     → variant back to plain Python (Absent → None).
- convert(value, switch=...) → the switch coercion rule; identity when switch is False.

All functions are pure and total over the variant.
"""
import functools
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import final

from rich.text import Text as RichText


@final
class AbsentType:
    """
    singleton marker for “no value found in any source”.

    behavior
    - falsy, printable as "Absent", rendered dimmed by rich.
    - non-subclassable; AbsentType() always yields the same instance.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Absent"

    def __rich__(self):
        return RichText("Absent", "dim")

    def __init_subclass__(cls, **options):
        raise TypeError("type 'AbsentType' is not an acceptable base type")


Absent = AbsentType()


@final
@dataclass(frozen=True, slots=True)
class Text:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError("Text() argument must be a string")


@final
@dataclass(frozen=True, slots=True)
class Flag:
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise TypeError("Flag() argument must be a boolean")

    def __bool__(self):
        return self.value


@final
@dataclass(frozen=True, slots=True)
class List:
    values: tuple[str, ...]

    def __post_init__(self):
        # accept any sequence of strings but store a tuple
        if isinstance(self.values, str) or not isinstance(self.values, Sequence):
            raise TypeError("List() argument must be a sequence of strings")
        if not all(isinstance(value, str) for value in self.values):
            raise TypeError("List() argument must be a sequence of strings")
        object.__setattr__(self, "values", tuple(self.values))

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)


ArgumentValue = AbsentType | Text | Flag | List

# textual spellings a switch treats as false (compared case-insensitively)
_FALSE_SPELLINGS = frozenset({"0", "false"})


def _scalar(object):
    if isinstance(object, bool):
        return "True" if object else "False"
    if isinstance(object, int | float | str):
        return str(object)
    raise TypeError("wrap() list items must be strings, numbers or booleans, not %s" % type(object).__name__)


def wrap(object, /):
    """
    turn a plain Python value into an argument value.

    rules
    - variants pass through unchanged.
    - None → Absent; bool → Flag; str → Text; int/float → Text(str(object)).
    - non-string sequences → List of their items rendered as text.

    raises
    - TypeError for mappings and any other unsupported type.
    """
    if isinstance(object, AbsentType | Text | Flag | List):
        return object
    if object is None:
        return Absent
    if isinstance(object, bool):
        return Flag(object)
    if isinstance(object, str):
        return Text(object)
    if isinstance(object, int | float):
        return Text(str(object))
    if isinstance(object, Sequence) and not isinstance(object, Mapping):
        return List(tuple(map(_scalar, object)))
    raise TypeError("wrap() argument must be a string, boolean, number or sequence, not %s" % type(object).__name__)


def unwrap(value, /):
    """
    turn an argument value back into plain Python (Absent → None, List → list).
    """
    if value is Absent:
        return None
    if isinstance(value, Text | Flag):
        return value.value
    if isinstance(value, List):
        return list(value.values)
    raise TypeError("unwrap() argument must be an argument value")


def convert(value, /, switch=False):
    """
    apply the switch coercion rule.

    with switch=True
    - Text "0" / "False" (any casing) and empty text → Flag(False)
    - any other Text → Flag(True)
    - Flag → unchanged
    - List → Flag(True) when non-empty, else Flag(False)
    - Absent → Absent

    with switch=False the value is returned unchanged.
    """
    if not switch or value is Absent or isinstance(value, Flag):
        return value
    if isinstance(value, Text):
        return Flag(bool(value.value) and value.value.casefold() not in _FALSE_SPELLINGS)
    if isinstance(value, List):
        return Flag(bool(value.values))
    raise TypeError("convert() argument must be an argument value")


__all__ = (
    "AbsentType",
    "Absent",
    "Text",
    "Flag",
    "List",
    "ArgumentValue",
    "wrap",
    "unwrap",
    "convert",
)
