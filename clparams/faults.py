"""
clparams faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every definition and
  provider issue. Codes are grouped by domain so logs and searches stay predictable.
- ParameterException / ParameterWarning: base types that carry message + options
  and know how to render themselves in a short, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Audience
- Definition faults are meant for the developer wiring up the command line,
  not for the end user typing it. Messages echo the offending value and the
  expected shape so they can be surfaced as-is.

Integration
- Parameter constructors raise these faults directly; nothing is printed.
- ParameterProvider routes them through trigger(fault, **ctx): raised outside
  shell mode, rendered via rich on stderr in shell mode.
"""
import copy
import inspect
import sys
import warnings
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
    canonical fault codes used across clparams (stable identifiers).

    grouping (by high-level domain)
    - naming (211xx)
      • MALFORMED_LONG_NAME, MALFORMED_SHORT_NAME
    - argument names (212xx)
      • EMPTY_ARGUMENT_NAME, LOWERCASE_ARGUMENT_NAME, INVALID_ARGUMENT_CHARACTER
    - choices (213xx)
      • INSUFFICIENT_ALTERNATIVES, DUPLICATE_ALTERNATIVE, INVALID_DEFAULT_VALUE
    - provider (221xx)
      • DUPLICATE_PARAMETER, UNKNOWN_PARAMETER, MISMATCHED_KIND
    - warnings (231xx)
      • UNCLAIMED_DATA
    """
    # --- naming errors (211xx) ---
    MALFORMED_LONG_NAME         = 21101
    MALFORMED_SHORT_NAME        = 21102

    # --- argument name errors (212xx) ---
    EMPTY_ARGUMENT_NAME         = 21201
    LOWERCASE_ARGUMENT_NAME     = 21202
    INVALID_ARGUMENT_CHARACTER  = 21203

    # --- choice errors (213xx) ---
    INSUFFICIENT_ALTERNATIVES   = 21301
    DUPLICATE_ALTERNATIVE       = 21302
    INVALID_DEFAULT_VALUE       = 21303

    # --- provider errors (221xx) ---
    DUPLICATE_PARAMETER         = 22101
    UNKNOWN_PARAMETER           = 22102
    MISMATCHED_KIND             = 22103

    # --- warnings (231xx) ---
    UNCLAIMED_DATA              = 23101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, styles, kind):
    """
    Build the rich renderable shared by exceptions and warnings.

    Layout
    - header: "[ prog — code | Title ]"
    - body: the message, then "→ hint" when a hint is present.
    - fancy mode wraps the body in a Panel titled by the header.
    """
    main = __import__("__main__")
    styles = defaultdict(str, styles | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

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

    prog = text(getattr(main, "__prog__", "clparams"), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.options["code"].normalize(), styler("code")),
        " | ",
        text(fault.options["title"].title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    parts = [message]
    if fault.options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options["hint"], styler("hint"))))

    if fault.options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")

    return Group(header, *parts)


class ParameterException(ValueError):
    """
    Base type for every definition-time and provider fault.

    Subclasses declare a default code and title through __fault__; callers
    may override any option (code, title, hint, shell, colorful, fancy) per
    instance.
    """
    __fault__ = ()

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(dict(self.__fault__) | options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedLongNameError(ParameterException):
    __fault__ = (("code", FaultCode.MALFORMED_LONG_NAME), ("title", "malformed long name"))
class MalformedShortNameError(ParameterException):
    __fault__ = (("code", FaultCode.MALFORMED_SHORT_NAME), ("title", "malformed short name"))
class EmptyArgumentNameError(ParameterException):
    __fault__ = (("code", FaultCode.EMPTY_ARGUMENT_NAME), ("title", "empty argument name"))
class LowercaseArgumentNameError(ParameterException):
    __fault__ = (("code", FaultCode.LOWERCASE_ARGUMENT_NAME), ("title", "lower-case argument name"))
class InvalidArgumentCharacterError(ParameterException):
    __fault__ = (("code", FaultCode.INVALID_ARGUMENT_CHARACTER), ("title", "invalid argument character"))
class InsufficientAlternativesError(ParameterException):
    __fault__ = (("code", FaultCode.INSUFFICIENT_ALTERNATIVES), ("title", "insufficient alternatives"))
class DuplicateAlternativeError(ParameterException):
    __fault__ = (("code", FaultCode.DUPLICATE_ALTERNATIVE), ("title", "duplicate alternative"))
class InvalidDefaultValueError(ParameterException):
    __fault__ = (("code", FaultCode.INVALID_DEFAULT_VALUE), ("title", "invalid default value"))
class DuplicateParameterError(ParameterException):
    __fault__ = (("code", FaultCode.DUPLICATE_PARAMETER), ("title", "duplicate parameter"))
class UnknownParameterError(ParameterException):
    __fault__ = (("code", FaultCode.UNKNOWN_PARAMETER), ("title", "unknown parameter"))
class MismatchedKindError(ParameterException):
    __fault__ = (("code", FaultCode.MISMATCHED_KIND), ("title", "mismatched kind"))


class ParameterWarning(Warning):
    """
    Base type for non-fatal provider issues.
    """
    __fault__ = ()

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(dict(self.__fault__) | options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnclaimedDataWarning(ParameterWarning):
    __fault__ = (("code", FaultCode.UNCLAIMED_DATA), ("title", "unclaimed data"))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParameterException",
    "MalformedLongNameError",
    "MalformedShortNameError",
    "EmptyArgumentNameError",
    "LowercaseArgumentNameError",
    "InvalidArgumentCharacterError",
    "InsufficientAlternativesError",
    "DuplicateAlternativeError",
    "InvalidDefaultValueError",
    "DuplicateParameterError",
    "UnknownParameterError",
    "MismatchedKindError",
    "ParameterWarning",
    "UnclaimedDataWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
