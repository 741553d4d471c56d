"""
cmdarg actions: value conversion and validation bound to descriptors.

Contract
- An action is a callable (current, argument, raw, /) -> Outcome where
  • current is the value stored for the descriptor so far (a string),
  • argument is the Argument being parsed (used for messages only),
  • raw is the text found on the command line ("" when no value was given).
- Outcome(value, status, reason=None). On Status.FAILURE the parser does not
  commit value; reason is a single line naming the flag and the rejected
  literal, written to the error sink. Plain callables may return a bare
  (value, status) pair.
- Actions never mutate parser state; they receive a value and return one.

Catalog
- store_string: copy raw input.
- store_true / store_false: write "true" / "false".
- show_help_and_exit: write "true" and fail on purpose. The action is marked
  helper=True, which the parser turns into a help request instead of an error.
- store_[constraint_]<type>: strict numeric validation, the raw text is stored
  verbatim. Types: int (32-bit), long and long_long (64-bit), float (32-bit),
  double (64-bit). Constraints: positive, negative, nonpositive, nonnegative,
  nonzero (or none).
- increment_<type>: parse the current value (unparsable counts as 0), add one
  and store the reformatted number. Raw input is ignored.

Registry
- ActionRegistry maps symbolic names to actions. default_registry() returns a
  fresh registry holding the whole catalog; parsers resolve string-named
  actions through the registry they were given.

Note
- store_int keeps "007" as "007", while increment_int turns "007" into "8".
  Stored literals are never canonicalised; increments always are.
"""
import math
import re
import struct
from abc import ABC, abstractmethod
from collections import namedtuple
from collections.abc import Mapping
from enum import IntEnum

from .utils import *


class Status(IntEnum):
    SUCCESS = 0
    FAILURE = -1


Outcome = namedtuple("Outcome", ("value", "status", "reason"), defaults=(None,))


_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOATING = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Numeric:
    """
    A fixed-width numeric type: strict parsing, range checks and formatting.

    - integers accept [+-]digits only and must fit in `bits` (two's complement);
      increments wrap around like the machine type.
    - floats accept decimal literals with an optional exponent; 32-bit values
      are rounded to single precision and must stay finite. Formatting follows
      C's "%g".
    """

    def __init__(self, name, bits, *, floating=False):
        self.name = name
        self.bits = bits
        self.floating = floating

    @property
    def title(self):
        return self.name.replace("_", " ")

    def _round(self, value):
        if self.bits == 32:
            try:
                return struct.unpack("<f", struct.pack("<f", value))[0]
            except OverflowError:
                raise ValueError(f"{value!r} does not fit a {self.title}") from None
        return value

    def parse(self, text):
        if self.floating:
            if not _FLOATING.fullmatch(text):
                raise ValueError(f"{text!r} is not a {self.title} literal")
            value = self._round(float(text))
            if math.isinf(value):
                raise ValueError(f"{text!r} does not fit a {self.title}")
            return value

        if not _INTEGER.fullmatch(text):
            raise ValueError(f"{text!r} is not a {self.title} literal")
        value = int(text)
        if not -(1 << self.bits - 1) <= value < 1 << self.bits - 1:
            raise ValueError(f"{text!r} does not fit a {self.title}")
        return value

    def format(self, value):
        if self.floating:
            return "%g" % self._round(value)
        low = -(1 << self.bits - 1)
        return str((value - low) % (1 << self.bits) + low)

    def __repr__(self):
        return f"numeric({self.name})"


NUMERICS = (
    Numeric("int", 32),
    Numeric("long", 64),
    Numeric("long_long", 64),
    Numeric("float", 32, floating=True),
    Numeric("double", 64, floating=True),
)

# constraint name -> (predicate, adjective used in messages)
CONSTRAINTS = {
    "positive": (lambda value: value > 0, "positive"),
    "negative": (lambda value: value < 0, "negative"),
    "nonpositive": (lambda value: value <= 0, "non-positive"),
    "nonnegative": (lambda value: value >= 0, "non-negative"),
    "nonzero": (lambda value: value != 0, "non-zero"),
}


class Action(ABC):
    """
    Base of the built-in actions.

    Subclasses implement __call__; `name` is the registry key and `helper`
    tells the parser that a failure means “help was requested”.
    """
    helper = False

    def __init__(self, name):
        self.name = name

    @abstractmethod
    def __call__(self, current, argument, raw, /): ...

    def __repr__(self):
        return f"action({self.name})"


class StoreString(Action):
    def __call__(self, current, argument, raw, /):
        return Outcome(raw, Status.SUCCESS)


class StoreBoolean(Action):
    def __init__(self, name, value):
        super().__init__(name)
        self.value = "true" if value else "false"

    def __call__(self, current, argument, raw, /):
        return Outcome(self.value, Status.SUCCESS)


class ShowHelp(Action):
    helper = True

    def __call__(self, current, argument, raw, /):
        # Always fails: the parser resolves a helper failure into a help request.
        return Outcome("true", Status.FAILURE)


class StoreNumber(Action):
    """
    Validate raw input as a number of the given type and constraint.

    Success stores the original text (no reformatting). Failure leaves the
    current value alone and reports the flag and the rejected literal.
    """

    def __init__(self, name, numeric, constraint=None):
        super().__init__(name)
        self.numeric = numeric
        self.constraint = constraint
        if constraint is None:
            self.check, adjective = (lambda value: True), None
        else:
            self.check, adjective = CONSTRAINTS[constraint]
        expected = " ".join(filter(None, (adjective, numeric.title)))
        self.expected = ("an " if expected[0] in "aeiou" else "a ") + expected

    def __call__(self, current, argument, raw, /):
        try:
            value = self.numeric.parse(raw)
        except ValueError:
            value = None
        if value is None or not self.check(value):
            return Outcome(current, Status.FAILURE, "argument %s: invalid value: %r (expected %s)" % (
                argument.label, raw, self.expected
            ))
        return Outcome(raw, Status.SUCCESS)


class Increment(Action):
    """
    Count occurrences: add one to the stored number, ignoring raw input.
    """

    def __init__(self, name, numeric):
        super().__init__(name)
        self.numeric = numeric

    def __call__(self, current, argument, raw, /):
        try:
            value = self.numeric.parse(current)
        except ValueError:
            value = 0
        return Outcome(self.numeric.format(value + 1), Status.SUCCESS)


def _catalog():
    actions = [
        StoreString("store_string"),
        StoreBoolean("store_true", True),
        StoreBoolean("store_false", False),
        ShowHelp("show_help_and_exit"),
    ]
    for numeric in NUMERICS:
        actions.append(StoreNumber("store_%s" % numeric.name, numeric))
    for constraint in CONSTRAINTS:
        for numeric in NUMERICS:
            actions.append(StoreNumber("store_%s_%s" % (constraint, numeric.name), numeric, constraint))
    for numeric in NUMERICS:
        actions.append(Increment("increment_%s" % numeric.name, numeric))
    return {action.name: action for action in actions}


_CATALOG = _catalog()


class ActionRegistry(Mapping):
    """
    Explicit mapping from symbolic name to action.

    - register(name, action) adds an entry; register(name) returns a decorator.
    - resolve(action) returns callables unchanged and looks names up.
    Duplicate names and non-callable actions are rejected.
    """

    def __init__(self, actions=(), /):
        self._actions = {}
        for name, action in dict(actions).items():
            self.register(name, action)

    def register(self, name, action=Unset, /):
        if not isinstance(name, str):
            raise TypeError("register() first argument must be a string")
        if not (name := name.strip()):
            raise ValueError("register() action name cannot be empty")
        if action is Unset:
            @rename("register")
            def wrapper(action, /):
                return self.register(name, action)
            return wrapper
        if not callable(action):
            raise TypeError("register() second argument must be callable")
        if name in self._actions:
            raise ValueError(f"action {name!r} is already registered")
        self._actions[name] = action
        return action

    def resolve(self, action, /):
        if callable(action):
            return action
        return self[action]

    def __getitem__(self, name):
        return self._actions[name]

    def __iter__(self):
        return iter(self._actions)

    def __len__(self):
        return len(self._actions)

    def __repr__(self):
        return f"action-registry({", ".join(self._actions)})"


def default_registry():
    """
    Build a fresh registry holding every built-in action.
    """
    return ActionRegistry(_CATALOG)


globals().update(_CATALOG)


__all__ = (
    "Status",
    "Outcome",
    "Numeric",
    "Action",
    "StoreString",
    "StoreBoolean",
    "ShowHelp",
    "StoreNumber",
    "Increment",
    "ActionRegistry",
    "default_registry",
) + tuple(_CATALOG)
