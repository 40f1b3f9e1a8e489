"""
Paramount faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  raised while locating configuration, registering arguments or matching
  parameter sets.
- ParameterException / ParameterWarning: base types that carry message + options
  and know how to render themselves in a friendly, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.
- console: the stderr rich console used for fault rendering and resolution traces.

Integration
- Library code builds a fault and hands it to trigger() (usually through
  ArgumentStore.trigger, which merges the store's rendering options).
- In non-shell mode exceptions are raised and warnings go through warnings.warn;
  in shell mode both are rendered with rich and errors exit with status 1.
"""
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the resolver (stable identifiers).

    grouping (by high-level domain)
    - configuration (2110x)
      • CONFIGURATION_FORMAT
    - registration (2111x)
      • DUPLICATE_ARGUMENT
    - matching (2112x / 2113x)
      • MISSING_MANDATORY_ARGUMENT, INSUFFICIENT_POSITIONALS,
        AMBIGUOUS_PARAMETER_SET, NO_MATCHING_PARAMETER_SET
    - warnings (22xxx)
      • OVERRIDDEN_ARGUMENT, UNPARSED_ARGUMENTS
    """
    # --- configuration errors (21xxx) ---
    CONFIGURATION_FORMAT        = 21101

    # --- registration errors (21xxx) ---
    DUPLICATE_ARGUMENT          = 21111

    # --- matching errors (21xxx) ---
    MISSING_MANDATORY_ARGUMENT  = 21121
    INSUFFICIENT_POSITIONALS    = 21122
    AMBIGUOUS_PARAMETER_SET     = 21131
    NO_MATCHING_PARAMETER_SET   = 21132

    # --- warnings (22xxx) ---
    OVERRIDDEN_ARGUMENT         = 22111
    UNPARSED_ARGUMENTS          = 22141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then "→ hint" when a hint is present.
    - fancy: wrap everything in a panel titled by the header.
    """
    main = __import__("__main__")
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", "paramount"), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.code.normalize(), styler("code")),
        " | ",
        text(fault.title.title(), styler("title")),
        " ]"
    )
    parts = [text(fault.message, styler("message"))]
    if fault.hint:
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(fault.hint, styler("hint"))))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")

    return Group(header, *parts)


class ParameterException(Exception):
    """
    base class for every resolution error.

    subclasses declare a default code/title/hint; any of them can be overridden
    per instance through options (code=..., title=..., hint=...). extra options
    (parameter names, paths, counts) are kept read-only in self.options.
    """
    code = Unset
    title = "parameter error"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        self.code = options.get("code", type(self).code)
        self.title = options.get("title", type(self).title)
        self.hint = options.get("hint", type(self).hint)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationFormatError(ParameterException):
    code = FaultCode.CONFIGURATION_FORMAT
    title = "malformed configuration"
    hint = "fix the json syntax of the file, it must hold a single object"


class DuplicateArgumentError(ParameterException):
    code = FaultCode.DUPLICATE_ARGUMENT
    title = "duplicated argument"
    hint = "pass force=True to replace the registered value"


class MissingMandatoryArgumentError(ParameterException):
    code = FaultCode.MISSING_MANDATORY_ARGUMENT
    title = "missing argument"


class InsufficientPositionalArgumentsError(ParameterException):
    code = FaultCode.INSUFFICIENT_POSITIONALS
    title = "missing positional arguments"


class AmbiguousParameterSetError(ParameterException):
    code = FaultCode.AMBIGUOUS_PARAMETER_SET
    title = "ambiguous parameter set"
    hint = "add the parameters that distinguish the intended parameter set"


class NoMatchingParameterSetError(ParameterException):
    """
    raised when every candidate parameter set failed.

    the individual failures are available through .exceptions (in candidate
    order); the message is their concatenation.
    """
    code = FaultCode.NO_MATCHING_PARAMETER_SET
    title = "no matching parameter set"

    def __init__(self, message=Unset, /, **options):
        super().__init__(message, **options)
        self.exceptions = tuple(options.get("exceptions", ()))


class ParameterWarning(ABC, Warning):
    """
    base class for non-fatal resolution faults.
    """
    code = Unset
    title = "parameter warning"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        self.code = options.get("code", type(self).code)
        self.title = options.get("title", type(self).title)
        self.hint = options.get("hint", type(self).hint)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OverriddenArgumentWarning(ParameterWarning):
    code = FaultCode.OVERRIDDEN_ARGUMENT
    title = "overridden argument"


class UnparsedArgumentsWarning(ParameterWarning):
    code = FaultCode.UNPARSED_ARGUMENTS
    title = "unparsed arguments"
    hint = "remove the extra inputs or declare them in the task's parameter sets"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors
      are raised and warnings are issued through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParameterException",
    "ConfigurationFormatError",
    "DuplicateArgumentError",
    "MissingMandatoryArgumentError",
    "InsufficientPositionalArgumentsError",
    "AmbiguousParameterSetError",
    "NoMatchingParameterSetError",
    "ParameterWarning",
    "OverriddenArgumentWarning",
    "UnparsedArgumentsWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
