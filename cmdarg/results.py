"""
cmdarg parse results.

Parser.parse() never exits the process. It returns one of:
- Parsed: read-only mapping of long name -> final string value (status 0).
- HelpRequested: the rendered help text, produced by the help action (status 0).
- ParseFailure: the fault that stopped parsing plus the rendered help (status 1).

resolve(stdout, stderr) turns a result into the behavior of a CLI front door:
Parsed returns itself, HelpRequested prints the help to stdout and exits with
status 0, ParseFailure prints the fault line, a blank line and the help to
stderr and exits with status 1. Consoles default to process-wide rich consoles.
"""
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType

from rich.console import Console

from .utils import *

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

stdout = Console()
stderr = Console(stderr=True)


class ParseResult(ABC):
    status = EXIT_SUCCESS

    @abstractmethod
    def resolve(self, stdout=Unset, stderr=Unset): ...


class Parsed(ParseResult, Mapping):
    """
    Successful parse: every registered long name mapped to its value.
    """

    def __init__(self, values, /):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def resolve(self, stdout=Unset, stderr=Unset):
        return self

    def __repr__(self):
        return f"parsed({dict(self._values)!r})"


class HelpRequested(ParseResult):
    """
    The help action ran: parsing stopped on purpose and help should be shown.
    """

    def __init__(self, text, /):
        self.text = text

    def resolve(self, stdout=Unset, stderr=Unset):
        console = coalesce(stdout, globals()["stdout"])
        console.out(self.text, end="", highlight=False)
        sys.exit(self.status)

    def __repr__(self):
        return "help-requested()"


class ParseFailure(ParseResult):
    """
    Parsing stopped on a fault (unknown switch, invalid value, bad positional count).
    """
    status = EXIT_FAILURE

    def __init__(self, fault, help, /):
        self.fault = fault
        self.help = help

    @property
    def text(self):
        return "%s\n\n%s" % (self.fault, self.help)

    def resolve(self, stdout=Unset, stderr=Unset):
        console = coalesce(stderr, globals()["stderr"])
        console.print(self.fault, soft_wrap=True)
        console.out("")
        console.out(self.help, end="", highlight=False)
        sys.exit(self.status)

    def __repr__(self):
        return f"parse-failure({type(self.fault).__name__}: {str(self.fault)!r})"


__all__ = (
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "ParseResult",
    "Parsed",
    "HelpRequested",
    "ParseFailure",
)
