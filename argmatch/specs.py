r"""
Argmatch specification compiler and descriptor model.

Specification grammar
    name1[,name2...] %<code>[{range}][X<n>][#[value text]#help text]

- Names are separated by ","; whitespace after a name makes it multi-word
  (the value comes in the following token(s)). Without whitespace the name
  is single-word: the value is concatenated to it ("-file=foo.txt" for
  "-file=%s"). When the last name of the group is multi-word, every name of
  the group is.
- Codes: i (integer, base auto-detected), o (octal), d (decimal), x (hex),
  c (char), b (boolean), f (float), s (string), v (flag, no value) and
  h (help request).
- {range}: admissible values, see argmatch.ranges. %v accepts a single
  boolean literal there, which becomes the value stored on match.
- X<n>: number of values consumed per match; needs multi-word names and an
  Array sink of length >= n (or a Collector).
- Help: "#text" is the option description; "#value#text" also replaces the
  generated <type> placeholder in help output.

Sinks and storage kinds
- The storage kind is resolved once, from the sink's declared ValueKind
  (or from the code's default kind when the sink is a Collector), and is
  carried by the descriptor afterwards.

Quick example:
    >>> size = Holder(ValueKind.INT)
    >>> descriptor = compile_spec("-size %d {1,2,4,8,16} #block size", size)
    >>> descriptor.aliases, descriptor.kind, descriptor.range_text
    ((Alias(name='-size', single=False),), <ValueKind.INT: 'int'>, '1,2,4,8,16')
    >>> descriptor.scan("-size", "4")
    4
"""
from collections import namedtuple

from .faults import *
from .holders import ValueKind, Holder, Array
from .ranges import parse_ranges, within_range
from .scanner import Scanner
from .utils import view

Alias = namedtuple("Alias", ("name", "single"))

CODES = "iodxcbfsvh"

_TYPENAMES = {
    "i": "integer",
    "o": "octal integer",
    "d": "decimal integer",
    "x": "hex integer",
    "c": "char",
    "b": "boolean",
    "f": "float",
    "s": "string",
}

# Kind used when the sink is a Collector (no declared width).
_DEFAULTS = {
    "i": ValueKind.LONG,
    "o": ValueKind.LONG,
    "d": ValueKind.LONG,
    "x": ValueKind.LONG,
    "c": ValueKind.CHAR,
    "b": ValueKind.BOOLEAN,
    "v": ValueKind.BOOLEAN,
    "f": ValueKind.DOUBLE,
    "s": ValueKind.STRING,
}

_ACCEPTS = {
    "i": ((ValueKind.INT, ValueKind.LONG), "an int or long"),
    "o": ((ValueKind.INT, ValueKind.LONG), "an int or long"),
    "d": ((ValueKind.INT, ValueKind.LONG), "an int or long"),
    "x": ((ValueKind.INT, ValueKind.LONG), "an int or long"),
    "c": ((ValueKind.CHAR,), "a char"),
    "b": ((ValueKind.BOOLEAN,), "a boolean"),
    "v": ((ValueKind.BOOLEAN,), "a boolean"),
    "f": ((ValueKind.FLOAT, ValueKind.DOUBLE), "a float or double"),
    "s": ((ValueKind.STRING,), "a string"),
}


def _invalid(message, code, title):
    return SpecificationError(message, code=code, title=title)


class Descriptor:
    """
    One compiled option (or delimiter line).

    Everything but `visible` is read-only once compiled. Descriptors are
    built by compile_spec() and Descriptor.delimiter(); ArgParser owns the
    ordered list they live in.
    """
    __displayable__ = ("aliases", "code", "kind", "multiplicity", "range_text", "value_text", "help_text", "visible")

    aliases = view("aliases")
    kind = view("kind")
    code = view("code")
    multiplicity = view("multiplicity")
    ranges = view("ranges")
    range_text = view("range_text")
    value_text = view("value_text")
    help_text = view("help_text")
    default = view("default")

    def __init__(
            self,
            aliases,
            kind,
            code,
            /,
            *,
            multiplicity=1,
            ranges=(),
            range_text=None,
            sink=None,
            value_text=None,
            help_text="",
            default=True,
            visible=True
    ):
        self._aliases = list(aliases)
        self._kind = kind
        self._code = code
        self._multiplicity = multiplicity
        self._ranges = list(ranges)
        self._range_text = range_text
        self._sink = sink
        self._value_text = value_text
        self._help_text = help_text
        self._default = default
        self.visible = visible

    @classmethod
    def delimiter(cls, text, /):
        """a help-only grouping line; never matched."""
        if not isinstance(text, str):
            raise TypeError("delimiter text must be a string")
        return cls((), ValueKind.DELIMITER, "", help_text=text)

    @property
    def sink(self):
        # Not a view: collectors must stay mutable lists.
        return self._sink

    @property
    def type_name(self):
        return _TYPENAMES.get(self._code, "unknown")

    @property
    def collects(self):
        return isinstance(self._sink, list)

    def matches(self, token, /):
        """
        return the alias that matches token, or None.

        single-word aliases match by prefix (the rest of the token is the
        value), except for %v flags which take no value; every other alias
        must equal the token.
        """
        if self._kind is ValueKind.DELIMITER:
            return None
        for alias in self._aliases:
            if self._code != "v" and alias.single:
                if token.startswith(alias.name):
                    return alias
            elif token == alias.name:
                return alias
        return None

    def allocate(self):
        """fresh result object appended to a collector on each match."""
        if self._multiplicity == 1:
            return Holder(self._kind)
        return Array(self._kind, self._multiplicity)

    def scan(self, name, text, /):
        """
        convert one value token for this option.

        raises EmptyValueError, MalformedValueError (with the storage kind as
        discriminant), OutOfRangeError or ValueOverflowError, each naming the
        alias and the raw text.
        """
        context = dict(alias=name, token=text)
        if not text:
            raise EmptyValueError(
                "%s: requires a contiguous value" % name,
                code=FaultCode.EMPTY_VALUE, title="empty value", **context
            )
        scanner = Scanner(text)
        try:
            match self._code:
                case "i":
                    value = scanner.scan_int()
                case "o":
                    value = scanner.scan_int(8, False)
                case "d":
                    value = scanner.scan_int(10, False)
                case "x":
                    value = scanner.scan_int(16, False)
                case "c":
                    value = scanner.scan_char()
                case "b":
                    value = scanner.scan_boolean()
                case "f":
                    value = scanner.scan_float()
                case "s":
                    value = scanner.rest()
                case _:
                    # %v and %h store no token; the engine never scans them
                    raise TypeError("%%%s options take no value" % self._code)
            scanner.skip_whitespace()
            malformed = not scanner.at_end()
        except ScanError:
            malformed = True
        if malformed:
            raise MalformedValueError(
                "%s: malformed %s '%s'" % (name, self.type_name, text),
                code=FaultCode.MALFORMED_VALUE, title="malformed value", kind=self._kind, **context
            )
        if not within_range(self._ranges, value):
            raise OutOfRangeError(
                "%s: value '%s' not in range %s" % (name, text, self._range_text),
                code=FaultCode.OUT_OF_RANGE, title="value out of range", **context
            )
        try:
            return self._kind.coerce(value)
        except OverflowError:
            raise ValueOverflowError(
                "%s: value '%s' does not fit in %s" % (name, text, self._kind.value),
                code=FaultCode.VALUE_OVERFLOW, title="value overflow", **context
            ) from None

    def __rich_repr__(self):
        for name in type(self).__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "descriptor(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def _aliases(scanner):
    aliases = []
    while True:
        scanner.skip_whitespace()
        start = scanner.index
        while (c := scanner.getc()) and not c.isspace() and c not in ",%":
            pass
        end = scanner.index - 1 if c else scanner.index
        if start == end:
            raise _invalid("null option name given", FaultCode.NULL_OPTION_NAME, "null option name")
        spaced = c.isspace()
        if spaced:
            scanner.skip_whitespace()
            c = scanner.getc()
        if not c:
            raise _invalid("no conversion character given", FaultCode.MISSING_CONVERSION, "missing conversion")
        if c not in ",%":
            raise _invalid("names not separated by ','", FaultCode.NAMES_NOT_SEPARATED, "names not separated")
        aliases.append(Alias(scanner.substring(start, end), not spaced))
        if c == "%":
            break
    if not aliases[-1].single:
        aliases = [alias._replace(single=False) for alias in aliases]
    return aliases


def _resolve(code, sink):
    if code == "h":
        return ValueKind.HELP
    if isinstance(sink, list):
        return _DEFAULTS[code]
    kinds, expected = _ACCEPTS[code]
    if isinstance(sink, Holder | Array) and sink.kind in kinds:
        return sink.kind
    raise _invalid(
        "invalid result holder for %%%s (expected %s holder or array)" % (code, expected),
        FaultCode.INVALID_RESULT_HOLDER, "invalid result holder"
    )


def compile_spec(spec, sink=None, /, visible=True):
    """
    Compile one specification string against its result sink.

    Any grammar violation or sink/kind mismatch raises SpecificationError;
    nothing is retained from a failed compilation.
    """
    if not isinstance(spec, str):
        raise TypeError("compile_spec() first argument must be a string")
    scanner = Scanner(spec)
    aliases = _aliases(scanner)
    code = scanner.getc()
    if not code:
        raise _invalid("no conversion character given", FaultCode.MISSING_CONVERSION, "missing conversion")
    if code not in CODES:
        raise _invalid(
            "conversion code '%s' not one of '%s'" % (code, CODES),
            FaultCode.INVALID_CONVERSION, "invalid conversion"
        )
    kind = _resolve(code, sink)
    if code == "h":
        sink = None

    ranges, range_text, default = [], None, True
    scanner.skip_whitespace()
    if scanner.peek() == "{":
        if code == "h":
            raise _invalid("ranges not supported for %h", FaultCode.UNSUPPORTED_RANGE, "unsupported range")
        ranges, range_text = parse_ranges(scanner, kind)
        if code == "v":
            if len(ranges) > 1:
                raise _invalid(
                    "%v accepts a single boolean default as range",
                    FaultCode.UNSUPPORTED_RANGE, "unsupported range"
                )
            if ranges:
                default = ranges[0].low.value

    multiplicity = 1
    if scanner.peek() == "X":
        if code == "h":
            raise _invalid("multipliers not supported for %h", FaultCode.UNSUPPORTED_MULTIPLIER, "unsupported multiplier")
        scanner.getc()
        try:
            multiplicity = scanner.scan_int()
        except ScanError:
            raise _invalid("malformed value multiplier", FaultCode.MALFORMED_MULTIPLIER, "malformed multiplier") from None
        if multiplicity <= 0:
            raise _invalid("value multiplier number must be > 0", FaultCode.MALFORMED_MULTIPLIER, "malformed multiplier")
    if multiplicity > 1:
        for alias in aliases:
            if alias.single:
                raise _invalid(
                    "multiplier value incompatible with one word option %s" % alias.name,
                    FaultCode.SINGLE_WORD_MULTIPLIER, "single word multiplier"
                )
    if isinstance(sink, Array):
        if len(sink) < multiplicity:
            raise _invalid(
                "result holder array must have a length >= %d" % multiplicity,
                FaultCode.SHORT_RESULT_HOLDER, "short result holder"
            )
    elif multiplicity > 1 and not isinstance(sink, list):
        raise _invalid(
            "multiplier requires result holder to be an array of length >= %d" % multiplicity,
            FaultCode.SHORT_RESULT_HOLDER, "short result holder"
        )

    value_text, help_text = None, ""
    scanner.skip_whitespace()
    if not scanner.at_end():
        if scanner.getc() != "#":
            raise _invalid("illegal character(s), expecting '#'", FaultCode.ILLEGAL_CHARACTERS, "illegal characters")
        info = scanner.rest()
        if "#" in info:
            value_text, help_text = info.split("#", 1)
        else:
            help_text = info

    return Descriptor(
        aliases,
        kind,
        code,
        multiplicity=multiplicity,
        ranges=ranges,
        range_text=range_text,
        sink=sink,
        value_text=value_text,
        help_text=help_text,
        default=default,
        visible=visible
    )


__all__ = (
    "Alias",
    "Descriptor",
    "compile_spec",
)
