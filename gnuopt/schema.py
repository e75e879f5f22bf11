"""
gnuopt schema: declare options, look them up, render usage text.

What this module provides
- Schema: an ordered collection of OptionSpecs with two lookup maps
  (short character -> spec, long name -> spec). Both maps point into the same
  ordered list, so a spec is stored once no matter how many names it has.
- Usage rendering:
  • render_usage(): plain, deterministic text (pure; no I/O).
  • print_usage(): the same lines styled and printed through rich.

Registration is a single-writer phase: finish every add() before handing the
schema to parsers running concurrently; parsing itself never mutates it.

Quick start
    from gnuopt import Schema

    schema = Schema(prog="tool", arguments="FILE ...")
    schema.add("v", "verbose", descr="talk more")
    schema.add("o", "output", "required", descr="write here", metavar="FILE", default="-")

    result = schema.parse(["-v", "-o", "out.txt", "in.txt"])
    print(schema.render_usage())

Usage layout
    Usage: tool [options] FILE ...
      -o FILE
      --output FILE
              write here (default: -)
      -v
      --verbose
              talk more
"""
import logging
import os.path
import sys
from collections import defaultdict
from operator import attrgetter

from rich.console import Console
from rich.text import Text

from .faults import DuplicateOptionError
from .options import ArgumentKind, OptionSpec
from .parser import Parser
from .utils import *

logger = logging.getLogger(__name__)

# Column layout of the option list.
_FORM_INDENT = " " * 2
_DESCR_INDENT = " " * 10


def _sanitize_text(name, object, /):
    if not isinstance(object, str | None | Unset):
        raise TypeError(f"schema {name!r} must be a string")
    elif isinstance(object, str) and not (object := object.strip()):
        raise ValueError(f"schema {name!r} cannot be empty")
    return coalesce(object)


class Schema:
    """
    Ordered option declarations plus the usage-text settings.

    Parameters
    - prog: program name for the usage line (falls back to __main__.__prog__,
      then to the basename of sys.argv[0]).
    - arguments: description of the operands, appended to the usage line.
    - header / footer: free text printed before / after the option list.
    """

    prog = mirror("prog")
    arguments = mirror("arguments")
    header = mirror("header")
    footer = mirror("footer")
    specs = mirror("specs")

    def __init__(self, prog=Unset, arguments=Unset, header=Unset, footer=Unset):
        self._prog = _sanitize_text("prog", prog)
        self._arguments = _sanitize_text("arguments", arguments)
        self._header = _sanitize_text("header", header)
        self._footer = _sanitize_text("footer", footer)

        self._specs = []
        self._shorts = {}
        self._longs = {}

    def add(self, short=Unset, long=Unset, kind=ArgumentKind.NONE, descr=Unset, metavar=Unset, default=Unset):
        """
        Declare an option and return its spec.

        Raises
        - NoNameError: neither `short` nor `long` was given.
        - DuplicateOptionError: `short` or `long` is already registered.
        - DefaultArgumentOnFlagError: `default` given while `kind` is NONE.
        - TypeError / ValueError: malformed names or metadata.

        Nothing is registered when an error is raised.
        """
        if isinstance(short, str) and short in self._shorts:
            raise DuplicateOptionError(short)
        if isinstance(long, str) and long in self._longs:
            raise DuplicateOptionError(long)

        spec = OptionSpec(short, long, kind, descr, metavar, default)

        index = len(self._specs)
        self._specs.append(spec)
        if spec.short is not None:
            self._shorts[spec.short] = index
        if spec.long is not None:
            self._longs[spec.long] = index

        logger.debug("registered option %s (kind=%s)", " ".join(spec.forms), spec.kind.value)
        return spec

    def by_short(self, name, /):
        """
        Return the spec registered under the short name `name`, or None.
        """
        try:
            return self._specs[self._shorts[name]]
        except KeyError:
            return None

    def by_long(self, name, /):
        """
        Return the spec registered under the long name `name`, or None.
        """
        try:
            return self._specs[self._longs[name]]
        except KeyError:
            return None

    def parse(self, tokens, /):
        """
        Parse `tokens` (argv without the program name) against this schema.
        """
        return Parser(self).parse(tokens)

    def _resolve_prog(self, prog):
        prog = coalesce(prog, self._prog)
        if prog is None:
            prog = getattr(__import__("__main__"), "__prog__", None)
        if prog is None:
            prog = os.path.basename(sys.argv[0]) if sys.argv else ""
        return prog

    def _lines(self, prog, arguments, header, footer):
        """
        Build the usage as lines of (fragment, style) pairs.

        Plain and rich rendering both consume this, so they never disagree.
        """
        arguments = coalesce(arguments, self._arguments)
        header = coalesce(header, self._header)
        footer = coalesce(footer, self._footer)

        usage = [("Usage", "usage-label"), (": ", ""), (self._resolve_prog(prog), "program-name")]
        if self._specs:
            usage.append((" [options]", "usage-section"))
        if arguments:
            usage.extend(((" ", ""), (arguments, "usage-section")))
        lines = [usage]

        if header:
            lines.extend(([], [(header, "header-section")]))

        for spec in sorted(self._specs, key=attrgetter("name")):
            for form in spec.forms:
                line = [(_FORM_INDENT, ""), (form, "option-name")]
                if spec.metavar is not None:
                    line.extend(((" ", ""), (spec.metavar, "metavar")))
                lines.append(line)

            if spec.descr is None and spec.default is None:
                continue
            line = [(_DESCR_INDENT, "")]
            if spec.descr is not None:
                line.append((spec.descr, "argument-description"))
            if spec.default is not None:
                line.append((" " if spec.descr is not None else "", ""))
                line.append(("(default: %s)" % spec.default, "default"))
            lines.append(line)

        if footer:
            lines.extend(([], [(footer, "footer-section")]))

        return lines

    def render_usage(self, prog=Unset, arguments=Unset, header=Unset, footer=Unset):
        """
        Return the usage text.

        Arguments left Unset fall back to the values given to the Schema.
        Options are listed sorted by name; each shows its short form, its long
        form, then its description with the default (if any) appended.
        """
        return "".join(
            "".join(fragment for fragment, _ in line) + "\n"
            for line in self._lines(prog, arguments, header, footer)
        )

    def print_usage(self, prog=Unset, arguments=Unset, header=Unset, footer=Unset, *, stderr=False, colorful=True):
        """
        Print the usage through rich.

        Palette keys
        - usage-label, program-name, usage-section
        - header-section, footer-section
        - option-name, metavar, argument-description, default

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        console = Console(stderr=stderr, highlight=False)
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
            "header-section": "italic #A3A3A3",  # Neutral gray
            "footer-section": "#737373",  # Dim footer gray

            "option-name": "bold #00E6FF",
            "metavar": "bold #FFD600",  # AMBER for parameters
            "argument-description": "#9CA3AF",  # Muted gray
            "default": "italic #22C55E",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if colorful and style else ""

        text = Text("\n").join(
            Text.assemble(*((fragment, styler(style)) for fragment, style in line))
            for line in self._lines(prog, arguments, header, footer)
        )
        console.print(text)

    def __len__(self):
        return len(self._specs)

    def __iter__(self):
        return iter(tuple(self._specs))

    def __contains__(self, name):
        return self.by_short(name) is not None or self.by_long(name) is not None

    def __getitem__(self, name):
        """
        Look a spec up by name; a single character tries the short names first.
        """
        if isinstance(name, str):
            if len(name) == 1 and (spec := self.by_short(name)) is not None:
                return spec
            if (spec := self.by_long(name)) is not None:
                return spec
        raise KeyError(name)

    def __repr__(self):
        return "schema(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "arguments", self._arguments
        yield "header", self._header
        yield "footer", self._footer
        yield "specs", self.specs


__all__ = (
    "Schema",
)
