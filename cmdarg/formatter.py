"""
cmdarg help formatter: usage synopsis and two-column help, wrapped to a width.

Layout
    usage: prog [-h] [-c COUNT] INPUT OUTPUT

    <description, wrapped to max_length>

    Required positional arguments:
        INPUT                       The input file

    Optional arguments:
        -h, --help                  Show this help message and exit
        -c, --count COUNT           A counter (default: '5')

    <epilogue, wrapped to max_length>

Parameters (frozen at construction)
- prog: program name. Defaults to __main__.__prog__ when the host defines it,
  else the basename of sys.argv[0].
- description / epilogue: free text, emitted only when non-empty.
- indent_base: column of the flag column (4).
- indent_help: column of the description column (32).
- max_length: maximum line width (80).
- indent_max_usage: cap for the usage continuation indent (32).

Terminal width
- HelpFormatter never queries the terminal. TerminalWrapHelpFormatter takes the
  width from a rich console once, at construction: the console width when it is
  attached to a terminal, otherwise an unbounded width.
"""
import os.path
import sys

from rich.console import Console

from .arguments import Arity
from .utils import *


def wrap(tokens, width, /):
    """
    Greedily pack tokens into lines no wider than width.

    Tokens are joined with single spaces; a token that does not fit on the
    current line starts a new one, and a token wider than width sits alone on
    its line (tokens are never split). At least one line is returned, so an
    empty token sequence yields [""].
    """
    lines = []
    line = []
    printed = 0

    for token in tokens:
        if line and printed + len(token) + 1 > width:
            lines.append(" ".join(line))
            line, printed = [], 0
        elif line:
            printed += 1
        line.append(token)
        printed += len(token)

    lines.append(" ".join(line))
    return lines


def _default_prog():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) if sys.argv else "")


class HelpFormatter:
    """
    Render usage and help text for lists of required and optional descriptors.

    The rendering is pure: the same descriptors always produce the same text.
    Subclasses may override the small _usage_*/_short_option/_long_option/
    _describe hooks to change individual fragments.
    """

    def __init__(
            self,
            prog=Unset,
            description="",
            epilogue="",
            *,
            indent_base=4,
            indent_help=32,
            max_length=80,
            indent_max_usage=32,
    ):
        prog = _default_prog() if prog is Unset else prog
        for name, object in (("prog", prog), ("description", description), ("epilogue", epilogue)):
            if not isinstance(object, str):
                raise TypeError(f"help-formatter {name!r} must be a string")

        layout = {
            "indent_base": indent_base,
            "indent_help": indent_help,
            "max_length": max_length,
            "indent_max_usage": indent_max_usage,
        }
        for name, object in layout.items():
            if not isinstance(object, int) or isinstance(object, bool):
                raise TypeError(f"help-formatter {name!r} must be an integer")
            if object < 0:
                raise ValueError(f"help-formatter {name!r} cannot be negative")
        if indent_help < indent_base:
            raise ValueError("help-formatter 'indent_help' cannot be smaller than 'indent_base'")

        self._prog = prog
        self._description = description
        self._epilogue = epilogue
        for name, object in layout.items():
            setattr(self, "_" + name, object)

    prog = mirror("prog")
    description = mirror("description")
    epilogue = mirror("epilogue")
    indent_base = mirror("indent_base")
    indent_help = mirror("indent_help")
    max_length = mirror("max_length")
    indent_max_usage = mirror("indent_max_usage")

    def metavar(self, argument):
        return str(argument.long).upper()

    def _parameter(self, argument):
        match argument.arity:
            case Arity.REQUIRED:
                return " " + self.metavar(argument)
            case Arity.OPTIONAL:
                return " [" + self.metavar(argument) + "]"
        return ""

    def _short_option(self, argument):
        if argument.required or not argument.short:
            return ""
        return "-" + argument.short + self._parameter(argument)

    def _long_option(self, argument):
        if argument.required:
            return self.metavar(argument)
        return "--" + argument.long + self._parameter(argument)

    def _usage_option(self, argument):
        if argument.required:
            return self.metavar(argument)
        return "[" + (self._short_option(argument) or self._long_option(argument)) + "]"

    def _default(self, argument):
        if argument.required or argument.arity is Arity.NO:
            return ""
        return " (default: '%s')" % argument.default

    def _describe(self, argument):
        return argument.help + self._default(argument)

    def _format_usage(self, lines, required, optional):
        usage = "usage: " + self.prog
        indent = len(usage) + 1

        if indent > self.indent_max_usage:
            # The program name alone overflows the cap: arguments start below it.
            indent = self.indent_max_usage
            lines.append(usage)
            prefix = " " * indent
        else:
            prefix = usage + " "

        tokens = [self._usage_option(argument) for argument in (*optional, *required)]
        for row in wrap(tokens, self.max_length - indent):
            lines.append(prefix + row)
            prefix = " " * indent

    def _format_text(self, lines, text):
        if text:
            lines.append("")
            lines.extend(wrap(text.split(), self.max_length))

    def _format_argument(self, lines, argument):
        column = self.indent_help - self.indent_base

        if argument.required:
            left = [self._long_option(argument)]
        elif argument.short:
            left = ["-" + argument.short + ",", self._long_option(argument)]
        else:
            # No short name: pad so the long name lines up with "-x, --long".
            left = ["    " + self._long_option(argument)]

        left = wrap(left, column)
        right = wrap(self._describe(argument).split(), self.max_length - self.indent_help)

        lines.extend(" " * self.indent_base + row for row in left[:-1])
        last = " " * self.indent_base + left[-1]

        if column - len(left[-1]) > 0:
            lines.append(last + " " * (column - len(left[-1])) + right[0])
        else:
            lines.append(last)
            lines.append(" " * self.indent_help + right[0])
        lines.extend(" " * self.indent_help + row for row in right[1:])

    def format_help(self, required, optional):
        """
        Render the full help text (usage, description, sections, epilogue).

        Every line, including the last one, ends with a newline; trailing blanks
        are stripped.
        """
        lines = []
        self._format_usage(lines, required, optional)
        self._format_text(lines, self.description)

        for title, arguments in (
                ("Required positional arguments:", required),
                ("Optional arguments:", optional),
        ):
            if not arguments:
                continue
            lines.append("")
            lines.append(title)
            for argument in arguments:
                self._format_argument(lines, argument)

        self._format_text(lines, self.epilogue)
        return "".join(line.rstrip() + "\n" for line in lines)

    def __repr__(self):
        return "help-formatter(%s)" % ", ".join("%s=%r" % (name, getattr(self, name)) for name in (
            "prog", "description", "epilogue", "indent_base", "indent_help", "max_length", "indent_max_usage",
        ))


class TerminalWrapHelpFormatter(HelpFormatter):
    """
    HelpFormatter whose max_length follows the terminal width.

    The width is read once from `console` (a fresh stdout console by default):
    its width when attached to a terminal, otherwise unbounded (sys.maxsize).
    Any max_length keyword is overwritten.
    """

    def __init__(self, prog=Unset, description="", epilogue="", *, console=Unset, **layout):
        console = Console() if console is Unset else console
        layout["max_length"] = console.width if console.is_terminal else sys.maxsize
        super().__init__(prog, description, epilogue, **layout)


__all__ = (
    "wrap",
    "HelpFormatter",
    "TerminalWrapHelpFormatter",
)
