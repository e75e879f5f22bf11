"""
gnuopt parser: classify an argument vector against a Schema.

phases
- scan
  • walk tokens left to right with a three-state machine:
      START       expecting an option or the first positional
      AWAITING    the previous option needs the next token as its value
      POSITIONALS option parsing is over; everything is a positional
  • record option values into a fresh ParseResult (see ParseResult._record).
  • stop at the first error; no partial result escapes.
- backfill
  • every declared option with a default and no recorded value gets its default.

token rules (in START)
- "-"          positional, and option parsing ends
- "--"         dropped, and option parsing ends
- "--name=val" long option with an attached value (never allowed on flags)
- "--name"     long option; REQUIRED/MULTIPLE take the next token whole
- "-abc"       short cluster; an argument-taking option swallows the rest of
               the token as its value, or the next token when it is last
- anything else (including "") is the first positional and ends option parsing

invoke() wraps parse() for command-line entry points: it renders parse errors
with rich and exits with status 1, like a conventional getopt-based tool.
"""
import logging
import shlex
import sys
from collections.abc import Iterable
from enum import Enum, auto
from types import MappingProxyType

from .faults import *
from .options import ArgumentKind, Present, Single, Repeated
from .utils import *

logger = logging.getLogger(__name__)


class State(Enum):
    START = auto()
    AWAITING = auto()
    POSITIONALS = auto()


class ParseResult:
    """
    Outcome of one parse: positionals plus the value of every option seen or defaulted.

    Values are stored once per spec (keyed by the spec itself), so looking an option
    up by its short or its long name always yields the same value.

    Access
    - result["a"] / result["all"]: by name; a single character tries short names first.
    - result[0]: positional by index.
    - result.short("a"), result.long("all"), result.get(name, default).
    - len(result) and iter(result): over the positionals.
    - result.positionals, result.shorts, result.longs: read-only views.
    """

    def __init__(self, schema, /):
        self._schema = schema
        self._positionals = []
        self._values = {}

    @property
    def positionals(self):
        return tuple(self._positionals)

    @property
    def shorts(self):
        return MappingProxyType({
            spec.short: value
            for spec, value in self._values.items()
            if spec.short is not None
        })

    @property
    def longs(self):
        return MappingProxyType({
            spec.long: value
            for spec, value in self._values.items()
            if spec.long is not None
        })

    def short(self, name, /):
        """
        Value recorded for the short option `name`, or None.
        """
        spec = self._schema.by_short(name)
        return None if spec is None else self._values.get(spec)

    def long(self, name, /):
        """
        Value recorded for the long option `name`, or None.
        """
        spec = self._schema.by_long(name)
        return None if spec is None else self._values.get(spec)

    def get(self, name, default=None, /):
        try:
            return self[name]
        except LookupError:
            return default

    def _append(self, token):
        self._positionals.append(token)

    def _record(self, value, spec, display):
        """
        Store `value` (a string, or None when no value was given) for `spec`.

        - NONE: Present.
        - OPTIONAL: Present without a value, Single otherwise.
        - REQUIRED: Single; a missing value raises MissingArgumentError(display).
        - MULTIPLE: appended to the Repeated recorded so far; a missing value raises.

        Only MULTIPLE accumulates: repeating any other option keeps the last value.
        """
        match spec.kind:
            case ArgumentKind.NONE:
                argument = Present
            case ArgumentKind.OPTIONAL:
                argument = Present if value is None else Single(value)
            case ArgumentKind.REQUIRED:
                if value is None:
                    raise MissingArgumentError(display)
                argument = Single(value)
            case ArgumentKind.MULTIPLE:
                if value is None:
                    raise MissingArgumentError(display)
                if isinstance(previous := self._values.get(spec), Repeated):
                    argument = previous.extended(value)
                else:
                    argument = Repeated((value,))
            case _:
                raise RuntimeError("unreachable")
        self._values[spec] = argument

    def _backfill(self):
        """
        Give every declared option that has a default and no value its default.
        """
        for spec in self._schema.specs:
            if spec.default is None or spec in self._values:
                continue
            match spec.kind:
                case ArgumentKind.OPTIONAL | ArgumentKind.REQUIRED:
                    self._values[spec] = Single(spec.default)
                case ArgumentKind.MULTIPLE:
                    self._values[spec] = Repeated((spec.default,))
                case _:
                    # defaults on flags are rejected at registration
                    pass

    def __getitem__(self, key):
        if isinstance(key, int):
            return self._positionals[key]
        if isinstance(key, str):
            if len(key) == 1 and (value := self.short(key)) is not None:
                return value
            if (value := self.long(key)) is not None:
                return value
        raise KeyError(key)

    def __contains__(self, name):
        return self.get(name) is not None

    def __len__(self):
        return len(self._positionals)

    def __iter__(self):
        return iter(tuple(self._positionals))

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return (self.positionals, dict(self.shorts), dict(self.longs)) == (other.positionals, dict(other.shorts), dict(other.longs))

    __hash__ = None

    def __repr__(self):
        return "parse-result(%s)" % ", ".join("%s=%r" % (name, object) for name, object in self.__rich_repr__())

    def __rich_repr__(self):
        yield "positionals", list(self._positionals)
        yield "shorts", dict(self.shorts)
        yield "longs", dict(self.longs)


class Parser:
    """
    Token-classification state machine bound to one Schema.

    A Parser holds no per-parse state; parse() builds a fresh ParseResult on
    every call, so one Parser may serve many argument vectors.
    """

    def __init__(self, schema, /):
        self._schema = schema

    @property
    def schema(self):
        return self._schema

    def parse(self, tokens, /):
        """
        Parse `tokens` (argv without the program name) into a ParseResult.

        Raises
        - IllegalOptionError: an unknown short or long option.
        - ExtraneousArgumentError: "--flag=value" for an option of kind NONE.
        - MissingArgumentError: a REQUIRED/MULTIPLE option without a value,
          including one left waiting at the end of the input.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")

        result = ParseResult(self._schema)
        state = State.START
        pending = None

        try:
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be an iterable of strings")

                match state:
                    case State.AWAITING:
                        result._record(token, *pending)
                        state, pending = State.START, None
                    case State.POSITIONALS:
                        result._append(token)
                    case State.START:
                        state, pending = self._classify(token, result)

            if state is State.AWAITING:
                raise MissingArgumentError(pending[1])
        except ParseError as e:
            logger.debug("parse failed: %s", e)
            raise

        result._backfill()
        logger.debug("parsed %d option(s) and %d positional(s)", len(result._values), len(result))
        return result

    def _classify(self, token, result):
        """
        Handle one token in START; return the next (state, pending) pair.
        """
        if token == "-":
            result._append(token)
            return State.POSITIONALS, None

        if token == "--":
            return State.POSITIONALS, None

        if token.startswith("--"):
            return self._long(token[2:], result)

        if token.startswith("-"):
            return self._cluster(token, result)

        result._append(token)
        return State.POSITIONALS, None

    def _long(self, body, result):
        name, equal, value = body.partition("=")
        display = "--" + name

        if (spec := self._schema.by_long(name)) is None:
            raise IllegalOptionError(display)

        if equal:
            if not spec.kind.takes_argument:
                raise ExtraneousArgumentError(display)
            result._record(value, spec, display)
            return State.START, None

        if spec.kind in (ArgumentKind.REQUIRED, ArgumentKind.MULTIPLE):
            return State.AWAITING, (spec, display)

        result._record(None, spec, display)
        return State.START, None

    def _cluster(self, token, result):
        for index in range(1, len(token)):
            display = "-" + token[index]

            if (spec := self._schema.by_short(token[index])) is None:
                raise IllegalOptionError(display)

            if not spec.kind.takes_argument:
                result._record(None, spec, display)
                continue

            # an argument-taking option ends the cluster
            if index + 1 < len(token):
                result._record(token[index + 1:], spec, display)
                return State.START, None
            if spec.kind is ArgumentKind.OPTIONAL:
                result._record(None, spec, display)
                return State.START, None
            return State.AWAITING, (spec, display)

        return State.START, None


def parse(schema, tokens, /):
    """
    Parse `tokens` against `schema`; shorthand for Parser(schema).parse(tokens).
    """
    return Parser(schema).parse(tokens)


def invoke(schema, prompt=Unset, /, *, shell=True, fancy=False, colorful=True):
    """
    Parse a command line the way a CLI entry point would.

    parameters
    - schema: the Schema to parse against.
    - prompt: Unset → sys.argv[1:]; str → split with shlex; otherwise an iterable of tokens.
    - shell: when True, a parse error prints the usage and the rendered fault to
      stderr and exits with status 1; when False, the error is raised.
    - fancy / colorful: rendering options forwarded to the fault.

    returns
    - the ParseResult on success.
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    else:
        tokens = prompt

    try:
        return Parser(schema).parse(tokens)
    except ParseError as e:
        if shell:
            schema.print_usage(stderr=True, colorful=colorful)
        trigger(e, prog=schema._resolve_prog(Unset), shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    "State",
    "ParseResult",
    "Parser",
    "parse",
    "invoke",
)
