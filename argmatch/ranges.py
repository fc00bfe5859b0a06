r"""
Argmatch range engine: admissible-value zones for option values.

Grammar (read directly off the compiler's scanner)
    { item (, item)* }
    item := value | ("[" | "(") value "," value ("]" | ")")

- "[" / "]" mark closed endpoints, "(" / ")" open ones.
- A bare value is a closed single-point atom.
- Endpoints are scanned with the descriptor's storage kind: integers with
  base auto-detection, floats, (escaped) characters, strings (bare words
  stop at ")],}" so they may be quoted to contain them) and booleans.
- Booleans (%b, %v) only accept bare values: a continuous zone over two
  states is meaningless.

Semantics
- RangeAtom.match(v): strictly between the endpoints, or equal to a closed
  one; single-point atoms match by equality.
- within_range(atoms, v): a union. True when any atom matches, and
  vacuously true when there are no atoms.

Quick example:
    >>> atoms, text = parse_ranges(Scanner("{[0,1), 4}"), ValueKind.DOUBLE)
    >>> within_range(atoms, 0.5), within_range(atoms, 1.0), text
    (True, False, '{[0,1), 4}')
"""
from .faults import FaultCode, ScanError, SpecificationError
from .holders import ValueKind

_DELIMITERS = ")],}"


class Endpoint:
    """one end of a range atom: a typed value plus its closed/open flag."""
    __slots__ = ("value", "closed")

    def __init__(self, value, /, closed=True):
        self.value = value
        self.closed = closed

    def __eq__(self, other):
        if not isinstance(other, Endpoint):
            return NotImplemented
        return self.value == other.value and self.closed == other.closed

    __hash__ = None

    def __repr__(self):
        return "endpoint(value=%r, closed=%r)" % (self.value, self.closed)


class RangeAtom:
    """
    A single admissible value, or a bounded zone between two endpoints.

    Bounded atoms are normalized on construction so that low <= high; the
    closed flags travel with their values when the endpoints are swapped.
    """
    __slots__ = ("_low", "_high")
    __displayable__ = ("low", "high")

    def __init__(self, low, high=None, /):
        if high is not None and high.value < low.value:
            low, high = high, low
        self._low = low
        self._high = high

    @property
    def low(self):
        return self._low

    @property
    def high(self):
        return self._high

    @property
    def bounded(self):
        return self._high is not None

    def match(self, value):
        low, high = self._low, self._high
        if high is None:
            return value == low.value
        return (
            low.value < value < high.value or
            (low.closed and value == low.value) or
            (high.closed and value == high.value)
        )

    __contains__ = match

    def __eq__(self, other):
        if not isinstance(other, RangeAtom):
            return NotImplemented
        return self._low == other._low and self._high == other._high

    __hash__ = None

    def __rich_repr__(self):
        for name in type(self).__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "range(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def within_range(atoms, value, /):
    """true when no atoms are declared, or when any of them admits value."""
    return not atoms or any(atom.match(value) for atom in atoms)


def _malformed(message):
    return SpecificationError(message, code=FaultCode.MALFORMED_RANGE, title="malformed range")


def _scan(scanner, kind):
    match kind:
        case ValueKind.CHAR:
            name, scan = "character", scanner.scan_char
        case ValueKind.INT | ValueKind.LONG:
            name, scan = "integer", scanner.scan_int
        case ValueKind.FLOAT | ValueKind.DOUBLE:
            name, scan = "float", scanner.scan_float
        case ValueKind.STRING:
            name, scan = "string", scanner.scan_string
        case ValueKind.BOOLEAN:
            name, scan = "boolean", scanner.scan_boolean
        case _:
            raise _malformed("ranges not supported for %s options" % kind.value)
    try:
        return scan()
    except ScanError as error:
        raise _malformed("malformed %s '%s' in range spec" % (
            name, scanner.substring(scanner.index, error.index + 1)
        )) from None


def _atoms(scanner, kind):
    scanner.getc()
    scanner.skip_whitespace()
    while (c := scanner.peek()) != "}":
        if not c:
            raise _malformed("unterminated range specification")
        if c in "[(":
            if kind is ValueKind.BOOLEAN:
                raise SpecificationError(
                    "sub ranges not supported for %b or %v",
                    code=FaultCode.UNSUPPORTED_RANGE,
                    title="unsupported range"
                )
            opening = scanner.getc()
            scanner.skip_whitespace()
            low = _scan(scanner, kind)
            scanner.skip_whitespace()
            if scanner.getc() != ",":
                raise _malformed("missing ',' in subrange specification")
            scanner.skip_whitespace()
            high = _scan(scanner, kind)
            scanner.skip_whitespace()
            closing = scanner.getc()
            if closing not in ("]", ")"):
                raise _malformed("unterminated subrange")
            yield RangeAtom(Endpoint(low, opening == "["), Endpoint(high, closing == "]"))
        else:
            yield RangeAtom(Endpoint(_scan(scanner, kind)))
        scanner.skip_whitespace()
        match scanner.peek():
            case ",":
                scanner.getc()
                scanner.skip_whitespace()
            case "}":
                pass
            case "":
                raise _malformed("unterminated range specification")
            case _:
                raise _malformed("range spec: ',' or '}' expected")
    scanner.getc()


def parse_ranges(scanner, kind, /):
    """
    Parse a range spec starting at the scanner's "{" and return
    (atoms, text).

    text is what messages and help show: the inner text when exactly one
    atom is declared, else the whole braced text. The scanner is left just
    past the closing "}".
    """
    start = scanner.index
    delimiters, scanner.delimiters = scanner.delimiters, _DELIMITERS
    try:
        atoms = list(_atoms(scanner, kind))
    finally:
        scanner.delimiters = delimiters
    text = scanner.substring(start, scanner.index)
    if len(atoms) == 1:
        text = text[1:-1]
    return atoms, text


__all__ = (
    "Endpoint",
    "RangeAtom",
    "parse_ranges",
    "within_range",
)
