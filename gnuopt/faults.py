"""
gnuopt faults (registration and parse errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every error the library raises.
  Codes are grouped by domain (registration 10xxx, parsing 11xxx) so logs and
  searches stay predictable.
- OptionError and subclasses: raised by Schema.add() when an option declaration
  is malformed. These are programming errors in the host application and are
  never recovered internally.
- ParseError and subclasses: raised by the parser when user input does not fit
  the schema. They carry the offending token and know how to render themselves
  with rich, so a CLI layer can print them and exit non-zero.
- trigger(): central entry point to surface a parse error (raise outside shell
  mode, print and exit inside it).

Host hooks (read from __main__ when present)
- __prog__: program name shown in fault headers.
- __styles__: palette overrides for rendering.
- __codes__: mapping FaultCode -> label used instead of the numeric value.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration (101xx)
      • NO_NAME, DUPLICATE_NAME, DEFAULT_ON_FLAG
    - parsing (111xx)
      • ILLEGAL_OPTION, EXTRANEOUS_ARGUMENT, MISSING_ARGUMENT
    """
    # --- registration errors (10xxx) ---
    NO_NAME             = 10101
    DUPLICATE_NAME      = 10102
    DEFAULT_ON_FLAG     = 10103

    # --- parse errors (11xxx) ---
    ILLEGAL_OPTION      = 11112
    EXTRANEOUS_ARGUMENT = 11113
    MISSING_ARGUMENT    = 11117

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class OptionError(ValueError):
    """
    Base class for errors raised while declaring options on a Schema.

    Attributes
    - name: the option name involved ("" when the option had no name at all).
    - code: the FaultCode identifying the error.
    """
    code = None

    def __init__(self, message, /, name=""):
        super().__init__(message)
        self.message = message
        self.name = name


class NoNameError(OptionError):
    code = FaultCode.NO_NAME

    def __init__(self):
        super().__init__("option has no name")


class DuplicateOptionError(OptionError):
    code = FaultCode.DUPLICATE_NAME

    def __init__(self, name, /):
        super().__init__("duplicate option %s" % name, name)


class DefaultArgumentOnFlagError(OptionError):
    code = FaultCode.DEFAULT_ON_FLAG

    def __init__(self, name, /):
        super().__init__("default argument for option %s with kind none" % name, name)


class ParseError(Exception):
    """
    Base class for input errors found while parsing an argument vector.

    Subclasses define a message template, a code, a title and a hint; the
    constructor only needs the offending option (token or display name).
    Additional keyword options (prog, shell, fancy, colorful, ...) steer
    rendering and are merged in by trigger() via __replace__.
    """
    __template__ = "%s"
    __title__ = "parse error"
    __hint__ = "check how %s is used against the usage above"
    code = None

    def __init__(self, option, /, **options):
        assert isinstance(option, str)
        self.option = option
        self.message = self.__template__ % option
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        prog = text(self.options.get("prog") or getattr(main, "__prog__", "") or "gnuopt", styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.options.get("title", self.__title__).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(
            text(" → ", styler("hint-arrow")),
            text(self.options.get("hint", self.__hint__ % self.option), styler("hint"))
        )

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.option, **{**self.options, **overrides})


class IllegalOptionError(ParseError):
    __template__ = "illegal option %s"
    __title__ = "illegal option"
    __hint__ = "%s is not a known option; see the usage above for the accepted ones"
    code = FaultCode.ILLEGAL_OPTION


class MissingArgumentError(ParseError):
    __template__ = "missing argument for %s"
    __title__ = "missing argument"
    __hint__ = "give %s a value, either attached or as the next argument"
    code = FaultCode.MISSING_ARGUMENT


class ExtraneousArgumentError(ParseError):
    __template__ = "%s takes no argument"
    __title__ = "extraneous argument"
    __hint__ = "remove everything from '=' (for example: %s)"
    code = FaultCode.EXTRANEOUS_ARGUMENT


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is printed to stderr and the process exits with 1;
      otherwise the fault is raised.

    typical options
    - prog, shell, fancy, colorful, title, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "OptionError",
    "NoNameError",
    "DuplicateOptionError",
    "DefaultArgumentOnFlagError",
    "ParseError",
    "IllegalOptionError",
    "MissingArgumentError",
    "ExtraneousArgumentError",
    "trigger",
)
