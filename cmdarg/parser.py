"""
cmdarg parsing engine: registration, two-phase scanning and the CLI front door.

What this module provides
- Parser: holds the registered descriptors, their stored values and the switch
  table, and turns a token vector into a typed result (see cmdarg.results).
- invoke(parser, prompt): run a parser the way a command-line entry point
  would, printing help or faults and exiting when parsing does not succeed.

Lifecycle
- IDLE: freshly built, only the built-in help flag (-h/--help) is registered.
- SCANNING_FLAGS: parse() walks the tokens with GNU getopt_long conventions.
  Non-flag tokens are set aside (argument permutation), "--" stops the scan
  and a lone "-" is a positional.
- CONSUMING_POSITIONALS: the tokens set aside fill the required descriptors
  in registration order.
- DONE: every descriptor holds its final value, parse() returned Parsed.
- HELP_ABORT: the help action ran or a fault stopped the parse, parse()
  returned HelpRequested or ParseFailure.

Flag syntax
- short: "-v", clusters "-vc10", attached "-c10" or spaced "-c 10" values.
  Optional-value short flags only take an attached value.
- long: "--count=10" or "--count 10". Optional-value long flags only take a
  value through "=". Unambiguous prefixes are accepted ("--cou" → "--count").

Quick start
    from cmdarg import Argument, Arity, Parser, invoke

    parser = Parser(prog="tool", description="Copy INPUT to OUTPUT.")
    parser.add_argument(Argument("count", "c", arity=Arity.REQUIRED, default="5", action="store_int"))
    parser.add_argument(Argument("input", required=True))
    parser.add_argument(Argument("output", required=True))

    options = invoke(parser, "-c 10 fileA fileB")
"""
import difflib
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from enum import Enum
from types import MappingProxyType

from .actions import *
from .arguments import *
from .faults import *
from .formatter import *
from .results import *
from .utils import *


class Phase(Enum):
    IDLE = "idle"
    SCANNING_FLAGS = "scanning-flags"
    CONSUMING_POSITIONALS = "consuming-positionals"
    DONE = "done"
    HELP_ABORT = "help-abort"


class _HelpRequest(Exception):
    """
    Internal: unwinds the scan when the help action fires.
    """


def _tokenize(prompt, caller, /):
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if not isinstance(prompt, Iterable):
        raise TypeError(f"{caller}() argument must be a string or an iterable of strings")
    tokens = list(prompt)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError(f"{caller}() argument must be a string or an iterable of strings")
    return tokens


def _spelling(long, /):
    """
    Internal: whether a long name can be typed as --long and stored as a key.
    """
    return (
        isinstance(long, str) and
        len(long) >= 2 and
        not long.startswith("-") and
        not any(char == "=" or char.isspace() for char in long)
    )


class Parser:
    """
    Declarative command-line parser.

    Construction
    - Parser(formatter): render help through a pre-built HelpFormatter.
    - Parser(prog=..., description=..., epilogue=..., indent_base=...,
      indent_help=..., max_length=..., indent_max_usage=...): build the
      HelpFormatter from its parameters.
    - registry: ActionRegistry used to resolve action names (a fresh default
      registry when omitted).
    - stdout / stderr: rich consoles used by __invoke__ to print help and faults.

    State
    - required / optional: descriptors in registration order (read-only).
    - values: long name → current string value (read-only snapshot).
    - switches: "-c" / "--count" → optional descriptor (read-only snapshot).
    - phase: where the last parse() stopped.
    """

    def __init__(self, formatter=Unset, /, *, registry=Unset, stdout=Unset, stderr=Unset, **params):
        if formatter is Unset:
            formatter = HelpFormatter(**params)
        elif params:
            raise TypeError("Parser() cannot take formatter parameters together with a formatter")
        elif not isinstance(formatter, HelpFormatter):
            raise TypeError("Parser() argument must be a help-formatter")

        registry = default_registry() if registry is Unset else registry
        if not isinstance(registry, ActionRegistry):
            raise TypeError("Parser() 'registry' must be an action-registry")

        self._formatter = formatter
        self._registry = registry
        self._stdout = stdout
        self._stderr = stderr
        self._required = []
        self._optional = []
        self._actions = {}
        self._values = {}
        self._switches = {}
        self._phase = Phase.IDLE

        self.add_argument(Argument(
            "help",
            "h",
            help="Show this help message and exit",
            default="false",
            action=show_help_and_exit,
        ))

    formatter = mirror("formatter")
    required = mirror("required")
    optional = mirror("optional")
    values = mirror("values")
    switches = mirror("switches")
    phase = mirror("phase")

    @property
    def registry(self):
        return self._registry

    def add_argument(self, argument, /):
        """
        Register a descriptor and return a Registration status.

        - INVALID_ARGUMENT: the long name is missing, shorter than two
          characters or not typeable as --long, or the action name is unknown
          to the registry.
        - DUPLICATED_ARGUMENT: the long name is taken, or the short name is
          already bound to another flag.
        A rejected descriptor leaves the parser untouched.
        """
        if not isinstance(argument, Argument):
            raise TypeError("add_argument() argument must be an argument")

        if not _spelling(argument.long):
            return Registration.INVALID_ARGUMENT
        try:
            action = self._registry.resolve(argument.action)
        except KeyError:
            return Registration.INVALID_ARGUMENT

        if argument.long in self._values:
            return Registration.DUPLICATED_ARGUMENT
        if not argument.required and argument.short and "-" + argument.short in self._switches:
            return Registration.DUPLICATED_ARGUMENT

        self._actions[argument.long] = action
        self._values[argument.long] = argument.default
        if argument.required:
            self._required.append(argument)
        else:
            self._optional.append(argument)
            self._switches = {switch: argument for argument in self._optional for switch in argument.switches}
        return Registration.SUCCESS

    def clear(self):
        """
        Reset every stored value to its descriptor's default.
        """
        for argument in (*self._required, *self._optional):
            self._values[argument.long] = argument.default

    def get_help(self):
        return self._formatter.format_help(tuple(self._required), tuple(self._optional))

    def trigger(self, fault, /, **options):
        trigger(fault, prog=self._formatter.prog, **options)

    def parse(self, tokens=Unset, /):
        """
        Parse tokens and return Parsed, HelpRequested or ParseFailure.

        tokens
        - Unset: sys.argv[1:].
        - str: split with shlex.split.
        - Iterable[str]: used as-is.

        Stored values are reset to their defaults first, so every call starts
        from the same state. Faults raised while scanning never escape: they
        come back inside ParseFailure together with the rendered help. The
        same holds for soft faults escalated to errors by a warnings filter.
        """
        tokens = deque(_tokenize(tokens, "parse"))
        self.clear()

        try:
            self._phase = Phase.SCANNING_FLAGS
            positionals = self._scan(tokens)
            self._phase = Phase.CONSUMING_POSITIONALS
            self._consume(positionals)
        except _HelpRequest:
            self._phase = Phase.HELP_ABORT
            return HelpRequested(self.get_help())
        except (ParserException, ParserWarning) as fault:
            self._phase = Phase.HELP_ABORT
            return ParseFailure(fault, self.get_help())

        self._phase = Phase.DONE
        return Parsed(self._values)

    def _scan(self, tokens):
        positionals = []
        while tokens:
            token = tokens.popleft()
            if token == "--":
                positionals.extend(tokens)
                break
            if token.startswith("--"):
                self._parse_long(token, tokens)
            elif token.startswith("-") and token != "-":
                self._parse_short(token, tokens)
            else:
                positionals.append(token)
        return positionals

    def _lookup(self, name, token):
        """
        Resolve a long name, accepting unique prefixes.
        """
        if (argument := self._switches.get("--" + name)) is not None:
            return argument

        candidates = [argument for argument in self._optional if name and argument.long.startswith(name)]
        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            possibilities = tuple("--" + argument.long for argument in candidates)
            return self.trigger(AmbiguousSwitchError(
                "option '--%s' is ambiguous; possibilities: %s" % (name, " ".join(map(repr, possibilities))),
                code=FaultCode.AMBIGUOUS_SWITCH,
                token=token,
                suggestions=possibilities,
                hint="spell out one of %s" % ", ".join(possibilities),
            ))

        longs = [switch for switch in self._switches if switch.startswith("--")]
        suggestions = tuple(difflib.get_close_matches("--" + name, longs, 5))
        if suggestions:
            hint = "did you mean %r? try '%s --help' to see all options" % (suggestions[0], self._formatter.prog)
        else:
            hint = "try '%s --help' to see all available options" % self._formatter.prog
        return self.trigger(UnknownSwitchError(
            "unrecognized option %r" % token,
            code=FaultCode.UNKNOWN_SWITCH,
            token=token,
            suggestions=suggestions,
            hint=hint,
        ))

    def _parse_long(self, token, tokens):
        name, separator, value = token[2:].partition("=")
        argument = self._lookup(name, token)
        switch = "--" + argument.long

        if not separator:
            value = None
        elif argument.arity is Arity.NO:
            return self.trigger(FlagAssignmentError(
                "option '%s' doesn't allow an argument" % switch,
                code=FaultCode.FLAG_ASSIGNMENT,
                token=token,
                argument=argument.label,
                hint="remove '=%s' from %s" % (value, switch),
            ))
        elif not value:
            self.trigger(EmptyOptionValueWarning(
                "empty value for option '%s'" % switch,
                code=FaultCode.EMPTY_INLINE_VALUE,
                token=token,
                argument=argument.label,
                hint="add a value after '=' (for example: %s=<value>)" % switch,
            ))

        if value is None and argument.arity is Arity.REQUIRED:
            if not tokens:
                return self.trigger(OptionValueRequiredError(
                    "option '%s' requires an argument" % switch,
                    code=FaultCode.OPTION_VALUE_REQUIRED,
                    token=token,
                    argument=argument.label,
                    hint="pass a value after a space or '=' (for example: %s=<value>)" % switch,
                ))
            value = tokens.popleft()

        self._apply(argument, "" if value is None else value)

    def _parse_short(self, token, tokens):
        index = 1
        while index < len(token):
            short = token[index]
            index += 1

            if (argument := self._switches.get("-" + short)) is None:
                return self.trigger(UnknownSwitchError(
                    "invalid option -- %r" % short,
                    code=FaultCode.UNKNOWN_SWITCH,
                    token=token,
                    suggestions=(),
                    hint="try '%s --help' to see all available options" % self._formatter.prog,
                ))

            if argument.arity is Arity.NO:
                self._apply(argument, "")
                continue

            # The rest of the cluster is the value.
            value = token[index:]
            if not value and argument.arity is Arity.REQUIRED:
                if not tokens:
                    return self.trigger(OptionValueRequiredError(
                        "option requires an argument -- %r" % short,
                        code=FaultCode.OPTION_VALUE_REQUIRED,
                        token=token,
                        argument=argument.label,
                        hint="pass a value right after -%s (for example: -%s <value>)" % (short, short),
                    ))
                value = tokens.popleft()
            return self._apply(argument, value)

    def _apply(self, argument, raw):
        """
        Run the descriptor's action and commit its value on success only.
        """
        action = self._actions[argument.long]
        value, status, *reason = action(self._values[argument.long], argument, raw)

        if status == Status.SUCCESS:
            self._values[argument.long] = value
            return
        if getattr(action, "helper", False):
            raise _HelpRequest

        self.trigger(InvalidValueError(
            reason[0] if reason and reason[0] else "argument %s: invalid value: %r" % (argument.label, raw),
            code=FaultCode.INVALID_VALUE,
            token=raw,
            argument=argument.label,
        ))

    def _consume(self, positionals):
        for argument, token in zip(self._required, positionals):
            self._apply(argument, token)

        if len(positionals) > len(self._required):
            surplus = positionals[len(self._required):]
            self.trigger(UnexpectedCardinalsError(
                "too many required options: %s" % " ".join(surplus),
                code=FaultCode.UNEXPECTED_CARDINALS,
                token=surplus[0],
                hint="expected %d positional argument(s), got %d" % (len(self._required), len(positionals)),
            ))

        if len(positionals) < len(self._required):
            missing = [self._formatter.metavar(argument) for argument in self._required[len(positionals):]]
            self.trigger(MissingCardinalsError(
                "missing required options: %s" % " ".join(missing),
                code=FaultCode.MISSING_CARDINALS,
                argument=missing[0],
                hint="expected %d positional argument(s), got %d" % (len(self._required), len(positionals)),
            ))

    def __invoke__(self, prompt=Unset):
        """
        Parse prompt and resolve the result: return the values, or print help
        (stdout, exit 0) or the fault and help (stderr, exit 1).
        """
        return self.parse(prompt).resolve(self._stdout, self._stderr)

    def __repr__(self):
        return "parser(prog=%r, required=%r, optional=%r)" % (
            self._formatter.prog,
            [argument.long for argument in self._required],
            [argument.long for argument in self._optional],
        )


def invoke(object, prompt=Unset, /):
    """
    Run a parser (anything implementing __invoke__) with a prompt.

    - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of str.
    - Returns whatever __invoke__ returns (the parsed mapping for Parser).
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Phase",
    "Parser",
    "invoke",
)
