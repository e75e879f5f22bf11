r"""
gnuopt option specifications and parsed values.

Overview
- ArgumentKind: whether an option takes no value, an optional value, a required
  value, or accumulates one value per occurrence.
- OptionSpec: one declared option (short and/or long name, kind, help metadata,
  default). Built by Schema.add(); read-only afterwards.
- ArgumentValue: what the parser stores for an option.
  • Present          the option was seen without a value
  • Single(value)    the option carries one value
  • Repeated(values) a MULTIPLE option, one value per occurrence, in input order

Metadata (sanitized on construction)
- short: Unset | None | str, exactly one character, not "-".
- long: Unset | None | str, non-empty, no whitespace or "=", no leading "-".
- kind: ArgumentKind or its lowercase string value.
- descr / metavar: Unset | None | str, trimmed, non-empty when provided.
- default: Unset | None | str, rejected on flags (kind NONE).

Quick example:
    >>> spec = OptionSpec("o", "output", "required", metavar="FILE")
    >>> spec.name, spec.forms
    ('o', ('-o', '--output'))
"""
import functools
import re
from enum import Enum

from .faults import NoNameError, DefaultArgumentOnFlagError
from .utils import *


class ArgumentKind(Enum):
    """
    Argument kinds an option can declare.

    - NONE: a flag; never takes a value.
    - OPTIONAL: takes a value only when attached (-aVALUE, --aa=VALUE).
    - REQUIRED: takes an attached value or the next token.
    - MULTIPLE: like REQUIRED, but every occurrence appends to a list.
    """
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"
    MULTIPLE = "multiple"

    @property
    def takes_argument(self):
        return self is not ArgumentKind.NONE


class ArgumentValue:
    """
    Base for parsed option values. Values are immutable and compare structurally.
    """
    __slots__ = ()

    @property
    def values(self):
        """
        All values carried, as a tuple (empty for Present).
        """
        raise NotImplementedError


class PresentType(ArgumentValue):
    """
    Value of an option that was given without an argument (singleton).
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    @property
    def values(self):
        return ()

    def __repr__(self):
        return "Present"

    def __reduce__(self):
        return "Present"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'PresentType' is not an acceptable base type")


Present = PresentType()


class Single(ArgumentValue):
    __slots__ = ("_value",)

    value = mirror("value")

    def __init__(self, value, /):
        if not isinstance(value, str):
            raise TypeError("Single() argument must be a string")
        self._value = value

    @property
    def values(self):
        return (self._value,)

    def __eq__(self, other):
        if not isinstance(other, Single):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((Single, self._value))

    def __repr__(self):
        return "Single(%r)" % self._value

    def __rich_repr__(self):
        yield self._value


class Repeated(ArgumentValue):
    """
    Values of a MULTIPLE option in input order.
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        values = tuple(values)
        if not all(isinstance(value, str) for value in values):
            raise TypeError("Repeated() argument must be an iterable of strings")
        self._values = values

    @property
    def values(self):
        return self._values

    def extended(self, value, /):
        """
        Return a new Repeated with `value` appended.
        """
        return Repeated(self._values + (value,))

    def __eq__(self, other):
        if not isinstance(other, Repeated):
            return NotImplemented
        return self._values == other._values

    def __hash__(self):
        return hash((Repeated, self._values))

    def __repr__(self):
        return "Repeated(%r)" % (list(self._values),)

    def __rich_repr__(self):
        yield list(self._values)


class OptionType(type):
    """
    Metaclass giving specs a typename, mirrored read-only properties and stable reprs.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - Every name in __introspectable__ becomes a read-only property over "_{name}".
    - __displayable__ (if set) narrows what __repr__/__rich_repr__ show.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the short/long names.

    Raises
    - NoNameError when neither name is given.
    - TypeError / ValueError when a name has the wrong type or shape.
    """
    if not isinstance(short := metadata["short"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and len(short) != 1:
        raise ValueError(f"{cls.__typename__} 'short' must be a single character")
    elif short == "-":
        raise ValueError(f"{cls.__typename__} 'short' cannot be '-'")
    metadata["short"] = coalesce(short)

    if not isinstance(long := metadata["long"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str) and not re.fullmatch(r"[^\s=\-][^\s=]*", long):
        raise ValueError(f"{cls.__typename__} 'long' must be non-empty, without spaces or '=', and not start with '-'")
    metadata["long"] = coalesce(long)

    if metadata["short"] is None and metadata["long"] is None:
        raise NoNameError()


def _sanitize_strings(cls, metadata, /):
    """
    Internal: trim descr/metavar/default and check their types.

    default is kept verbatim (an empty default is a legitimate value).
    """
    for name in ("descr", "metavar"):
        if not isinstance(object := metadata[name], str | None | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if not isinstance(default := metadata["default"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    metadata["default"] = coalesce(default)


def _sanitize_kind(cls, metadata, /):
    """
    Internal: normalize the kind and reject defaults on flags.
    """
    try:
        metadata["kind"] = kind = ArgumentKind(metadata["kind"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'kind' must be one of {', '.join(repr(kind.value) for kind in ArgumentKind)}") from None

    if kind is ArgumentKind.NONE and metadata["default"] is not None:
        raise DefaultArgumentOnFlagError(metadata["short"] if metadata["short"] is not None else metadata["long"])


class OptionSpec(metaclass=OptionType):
    """
    One declared option.

    Properties
    - short, long, kind, descr, metavar, default: the sanitized metadata.
    - name: the short name if present, else the long name (used in messages and for sorting).
    - forms: the spellings accepted on the command line, e.g. ('-o', '--output').
    """

    __introspectable__ = (
        "short",
        "long",
        "kind",
        "descr",
        "metavar",
        "default",
    )

    def __new__(
            cls,
            short=Unset,
            long=Unset,
            kind=ArgumentKind.NONE,
            descr=Unset,
            metavar=Unset,
            default=Unset,
    ):
        metadata = {
            "short": short,
            "long": long,
            "kind": kind,
            "descr": descr,
            "metavar": metavar,
            "default": default,
        }
        _sanitize_names(cls, metadata)
        _sanitize_strings(cls, metadata)
        _sanitize_kind(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def name(self):
        if self._short is not None:
            return self._short
        return self._long if self._long is not None else ""

    @property
    def forms(self):
        forms = []
        if self._short is not None:
            forms.append("-" + self._short)
        if self._long is not None:
            forms.append("--" + self._long)
        return tuple(forms)


__all__ = (
    "ArgumentKind",
    "ArgumentValue",
    "PresentType",
    "Present",
    "Single",
    "Repeated",
    "OptionSpec",
)

# The metaclass is an implementation detail.
del OptionType
