r"""
Argmatch scanner: a character cursor producing typed literals.

Overview
- Scanner wraps one string and a read position. Typed scans consume the
  maximal valid prefix at the cursor and return a Python value:
  • scan_int(base, detect)  → int (sign, then digits; 0x/0 prefixes when detect)
  • scan_float()            → float (decimal grammar with optional exponent)
  • scan_char()             → str of length 1 (escapes, optional single quotes)
  • scan_boolean()          → bool ("true"/"false", case-insensitive)
  • scan_string()           → str (double-quoted with escapes, or bare word)
  • rest()                  → str (everything left)
- substring(start, end) slices the original input losslessly; callers use it
  to quote exactly the malformed text in their messages.

Failure contract
- Every failed scan raises ScanError with options["index"] set to the
  offending position and restores the cursor to where the scan started, so
  `scanner.substring(scanner.index, error.index + 1)` is the bad token.

Quick example:
    >>> scanner = Scanner("0x1F, 'a'")
    >>> scanner.scan_int()
    31
    >>> scanner.getc(), scanner.skip_whitespace(), scanner.scan_char()
    (',', None, 'a')
"""
import re

from .faults import ScanError, FaultCode

_FLOAT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "b": "\b",
    "r": "\r",
    "f": "\f",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

# Widest integer storage kind (LONG) bounds every scanned integer.
_LONG = (-(1 << 63), (1 << 63) - 1)


def _failure(message, index):
    return ScanError(message, index=index, code=FaultCode.MALFORMED_LITERAL, title="malformed literal")


class Scanner:
    """
    Stateful cursor over an immutable string.

    One scanner serves one parse task (a spec string, a range spec or a single
    value token) and is discarded afterwards; it is not meant to be shared.

    Attributes
    - source: the scanned string (read-only).
    - index: current read position; assignable to rewind.
    - delimiters: characters that terminate bare strings (besides whitespace).
    """
    __slots__ = ("_source", "index", "delimiters")

    def __init__(self, source, /, delimiters=""):
        if not isinstance(source, str):
            raise TypeError("scanner source must be a string")
        self._source = source
        self.index = 0
        self.delimiters = delimiters

    @property
    def source(self):
        return self._source

    def __repr__(self):
        return "scanner(source=%r, index=%d)" % (self._source, self.index)

    def at_end(self):
        return self.index >= len(self._source)

    def peek(self):
        """Return the character at the cursor, or "" at end of input."""
        if self.at_end():
            return ""
        return self._source[self.index]

    def getc(self):
        """Consume and return one character; "" at end of input (cursor unchanged)."""
        if self.at_end():
            return ""
        self.index += 1
        return self._source[self.index - 1]

    def ungetc(self):
        if self.index > 0:
            self.index -= 1

    def skip_whitespace(self):
        while not self.at_end() and self._source[self.index].isspace():
            self.index += 1

    def substring(self, start, end=None, /):
        if end is None:
            end = len(self._source)
        return self._source[start:end]

    def rest(self):
        """Consume the remainder of the input and return it."""
        start, self.index = self.index, len(self._source)
        return self._source[start:]

    def scan_int(self, base=10, detect=True):
        """
        Scan a signed integer.

        With detect, a 0x/0X prefix selects base 16 and a leading 0 selects
        base 8; otherwise `base` is used as-is.
        """
        index = self.index
        source = self._source
        sign = 1
        if index < len(source) and source[index] in "+-":
            sign = -1 if source[index] == "-" else 1
            index += 1
        if detect:
            if source.startswith(("0x", "0X"), index):
                base = 16
                index += 2
            elif source.startswith("0", index):
                base = 8
            else:
                base = 10
        first = index
        value = 0
        while index < len(source) and (digit := _digit(source[index])) < base:
            value = value * base + digit
            index += 1
        if index == first:
            raise _failure("malformed integer", self._clamp(index))
        value *= sign
        if not _LONG[0] <= value <= _LONG[1]:
            raise _failure("integer out of range", index - 1)
        self.index = index
        return value

    def scan_float(self):
        match = _FLOAT.match(self._source, self.index)
        if not match:
            raise _failure("malformed float", self._clamp(self.index))
        self.index = match.end()
        return float(match.group())

    def scan_boolean(self):
        start = index = self.index
        while index < len(self._source) and self._source[index].isascii() and self._source[index].isalpha():
            index += 1
        match self._source[start:index].lower():
            case "true":
                value = True
            case "false":
                value = False
            case _:
                raise _failure("malformed boolean", self._clamp(max(start, index - 1)))
        self.index = index
        return value

    def scan_char(self):
        start = self.index
        try:
            quoted = self.peek() == "'"
            if quoted:
                self.getc()
            if self.at_end():
                raise _failure("malformed character", max(self.index - 1, 0))
            value = self._escaped()
            if quoted and self.getc() != "'":
                raise _failure("unterminated character quote", max(self.index - 1, 0))
        except ScanError:
            self.index = start
            raise
        return value

    def scan_string(self):
        """
        Scan a double-quoted string (with escapes) or a bare word.

        Bare words stop at whitespace, at any of self.delimiters, or at end
        of input; an empty bare word is a failure.
        """
        start = self.index
        if self.peek() == '"':
            self.getc()
            characters = []
            try:
                while (c := self.peek()) != '"':
                    if not c:
                        raise _failure("unterminated string", self._clamp(self.index))
                    characters.append(self._escaped())
            except ScanError:
                self.index = start
                raise
            self.getc()
            return "".join(characters)
        while not self.at_end() and not (c := self.peek()).isspace() and c not in self.delimiters:
            self.index += 1
        if self.index == start:
            raise _failure("malformed string", self._clamp(start))
        return self._source[start:self.index]

    def _clamp(self, index):
        return max(0, min(index, len(self._source) - 1))

    def _escaped(self):
        """Consume one possibly backslash-escaped character."""
        c = self.getc()
        if c != "\\":
            return c
        index = self.index - 1
        c = self.getc()
        if c in _ESCAPES:
            return _ESCAPES[c]
        if c and c in "01234567":
            digits = c
            while len(digits) < 3 and self.peek() and self.peek() in "01234567":
                digits += self.getc()
            return chr(int(digits, 8))
        raise _failure("malformed escape sequence", index if not c else self.index - 1)


def _digit(c):
    if "0" <= c <= "9":
        return ord(c) - ord("0")
    if "a" <= c.lower() <= "z" and c.isascii():
        return ord(c.lower()) - ord("a") + 10
    return 99


__all__ = (
    "Scanner",
)
