r"""
cmdarg argument descriptors.

Overview
- Arity: how many value tokens a flag consumes (NO / REQUIRED / OPTIONAL). The
  numbering matches getopt's has_arg so plain 0/1/2 are accepted everywhere.
- Argument: immutable description of one command-line argument, either
  • required: a positional, filled after all flags were scanned, in
    registration order; or
  • optional: a flag spelled --long and, when given, -s.

Metadata (sanitized on construction)
- long: str | None. Kept as given; the parser rejects names that are missing,
  shorter than two characters or not typeable as --long at registration time
  (registration reports a status code instead of raising).
- short: single character or None. '-', '=' and whitespace are rejected.
- required: bool.
- arity: Arity (ints are coerced).
- help / default: strings.
- action: callable (current, argument, raw) -> outcome, or the name of an
  action known to the parser's registry (default: "store_string").

Introspection & representation
- DescriptorType metaclass exposes every field listed in __introspectable__ as a
  read-only property and provides stable __repr__/__rich_repr__.

Quick example:
    >>> from cmdarg.arguments import Argument, Arity
    >>> count = Argument("count", "c", arity=Arity.REQUIRED, default="5", action="store_int")
    >>> count.switches
    ('-c', '--count')
"""
import functools
import operator
import re
from enum import IntEnum

from .utils import *


class Arity(IntEnum):
    """
    value arity of a flag.

    - NO: presence only, '--flag=value' is an error.
    - REQUIRED: takes the next token (or an attached / '=' value).
    - OPTIONAL: takes a value only when attached ('-sVALUE') or inlined
      ('--long=VALUE'); a following bare token is never consumed.
    """
    NO = 0
    REQUIRED = 1
    OPTIONAL = 2


class DescriptorType(type):
    """
    Metaclass that turns descriptor classes into read-only, introspectable values.

    - Every name in __introspectable__ becomes a property mirroring "_{name}".
    - __typename__ (hyphenated lower-case class name) is used in messages.
    - __repr__/__rich_repr__ list the introspectable fields in order.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the long/short spelling of a descriptor.

    - long must be a string or None. Length and spelling are checked by the
      parser during registration so that a bad name yields a status code.
    - short must be None/Unset or exactly one character that can follow a '-'
      in a short-option cluster.
    """
    if not isinstance(metadata["long"], str | None):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")

    short = metadata["short"]
    if short is Unset or short is None:
        metadata["short"] = None
        return
    if not isinstance(short, str):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    if len(short) != 1:
        raise ValueError(f"{cls.__typename__} 'short' must be a single character")
    if short in "-=" or short.isspace():
        raise ValueError(f"{cls.__typename__} 'short' cannot be {short!r}")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate arity, texts and the action reference.
    """
    try:
        metadata["arity"] = Arity(metadata["arity"])
    except (ValueError, TypeError):
        raise ValueError(
            f"{cls.__typename__} 'arity' must be one of %s" % ", ".join(arity.name for arity in Arity)
        ) from None

    for name in ("help", "default"):
        if not isinstance(metadata[name], str):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")

    action = metadata["action"]
    if isinstance(action, str):
        if not action.strip():
            raise ValueError(f"{cls.__typename__} 'action' name cannot be empty")
    elif not callable(action):
        raise TypeError(f"{cls.__typename__} 'action' must be callable or an action name")


class Argument(metaclass=DescriptorType):
    """
    Immutable description of one command-line argument.

    Properties
    - long, short, required, arity, help, default, action (read-only).
    - switches: the spellings a flag answers to ('-c', '--count'); empty for
      required (positional) descriptors.
    - label: how messages name the argument ('-c/--count', '--count' or the
      upper-cased long name for positionals).
    """

    __introspectable__ = (
        "long",
        "short",
        "required",
        "arity",
        "help",
        "default",
        "action",
    )

    def __new__(
            cls,
            long,
            /,
            short=Unset,
            *,
            required=False,
            arity=Arity.NO,
            help="",
            default="",
            action="store_string",
    ):
        metadata = {
            "long": long,
            "short": short,
            "required": bool(required),
            "arity": arity,
            "help": help,
            "default": default,
            "action": action,
        }
        _sanitize_names(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def switches(self):
        if self.required or self.long is None:
            return ()
        if self.short:
            return "-" + self.short, "--" + self.long
        return "--" + self.long,

    @property
    def label(self):
        if self.required:
            return str(self.long).upper()
        return "/".join(self.switches)


__all__ = (
    "Arity",
    "Argument",
)

del DescriptorType
