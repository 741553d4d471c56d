"""
cmdarg faults (errors and warnings) and rendering.

Scope
- Registration: status codes returned by Parser.add_argument (no exception).
- FaultCode: stable numeric identifiers for every parse-time issue, grouped by
  domain so logs and searches stay predictable.
- ParserException / ParserWarning: base types carrying a message plus read-only
  options (code, prog, token, argument, hint, suggestions) that know how to
  render themselves as one plain line (__str__) or through rich (__rich__).
- trigger(): central entry point to fire a fault with merged options. Exceptions
  are raised, warnings are emitted through the warnings module.

Integration
- The parser raises faults while scanning, catches them at the parse() boundary
  and hands them back inside a ParseFailure result.
- Rendering palette can be overridden with a __styles__ mapping in __main__.
"""
import copy
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .utils import Unset


class Registration(IntEnum):
    """
    status codes of Parser.add_argument.

    - SUCCESS: the descriptor was registered.
    - INVALID_ARGUMENT: missing/short/unusable long name or unknown action name.
    - DUPLICATED_ARGUMENT: long name (or short name of a flag) already taken.
    """
    SUCCESS = 0
    INVALID_ARGUMENT = -1
    DUPLICATED_ARGUMENT = -2


class FaultCode(IntEnum):
    """
    canonical fault codes raised while parsing (stable identifiers).

    grouping
    - switches (311xx): UNKNOWN_SWITCH, AMBIGUOUS_SWITCH, FLAG_ASSIGNMENT,
      OPTION_VALUE_REQUIRED
    - values (312xx): INVALID_VALUE
    - positionals (313xx): UNEXPECTED_CARDINALS, MISSING_CARDINALS
    - warnings (321xx): EMPTY_INLINE_VALUE
    """
    # --- switch errors (311xx) ---
    UNKNOWN_SWITCH              = 31101
    AMBIGUOUS_SWITCH            = 31102
    FLAG_ASSIGNMENT             = 31103
    OPTION_VALUE_REQUIRED       = 31104

    # --- value errors (312xx) ---
    INVALID_VALUE               = 31201

    # --- positional errors (313xx) ---
    UNEXPECTED_CARDINALS        = 31301
    MISSING_CARDINALS           = 31302

    # --- warnings (321xx) ---
    EMPTY_INLINE_VALUE          = 32101


def _styles(palette):
    return defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))


class _Fault:
    """
    Shared message/options plumbing of ParserException and ParserWarning.
    """
    __palette__ = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        line = str(self.message) if self.message else ""
        if prog := self.options.get("prog"):
            line = "%s: %s" % (prog, line)
        if self.hint:
            line += "\n  → %s" % self.hint
        return line

    def __rich__(self):
        styles = _styles(self.__palette__)
        line = Text(self.options["prog"] + ": ", styles["prog-name"]) if self.options.get("prog") else Text("")
        line.append(str(self.message) if self.message else "", styles["message"])
        if self.hint:
            line.append("\n  → ", styles["hint-arrow"])
            line.append(self.hint, styles["hint"])
        return line

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParserException(_Fault, Exception):
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "message": "#FF4DA6",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __trigger__(self):
        raise self from None


class UnknownSwitchError(ParserException): ...
class AmbiguousSwitchError(ParserException): ...
class FlagAssignmentError(ParserException): ...
class OptionValueRequiredError(ParserException): ...
class InvalidValueError(ParserException): ...
class UnexpectedCardinalsError(ParserException): ...
class MissingCardinalsError(ParserException): ...


class ParserWarning(_Fault, ABC, Warning):
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "message": "#FFB400",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __trigger__(self):
        warnings.warn(self, stacklevel=self.options.get("stacklevel", 4))


class EmptyOptionValueWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    fire a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into the fault via copy.replace() before firing.
    - exceptions propagate to the caller; warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "Registration",
    "FaultCode",
    "ParserException",
    "UnknownSwitchError",
    "AmbiguousSwitchError",
    "FlagAssignmentError",
    "OptionValueRequiredError",
    "InvalidValueError",
    "UnexpectedCardinalsError",
    "MissingCardinalsError",
    "ParserWarning",
    "EmptyOptionValueWarning",
    "trigger",
)
