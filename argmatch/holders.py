"""
Argmatch result holders: where matched values land.

Overview
- ValueKind: the storage tag resolved once per descriptor (BOOLEAN, CHAR,
  INT, LONG, FLOAT, DOUBLE, STRING, plus HELP and DELIMITER for descriptors
  that never store anything).
- Holder: a typed scalar cell (`holder.value`).
- Array: a typed fixed-size sequence, for options with a multiplier.
- Collector: a growable list; every match appends a fresh Holder/Array.

Widths
- INT is signed 32-bit and LONG signed 64-bit; FLOAT is rounded to IEEE
  single precision. ValueKind.coerce() raises OverflowError when a value
  does not fit, and the engine turns that into a match error.

Quick example:
    >>> size = Holder(int)
    >>> size.kind, size.value
    (<ValueKind.LONG: 'long'>, None)
    >>> position = Array(ValueKind.DOUBLE, 3)
    >>> list(position)
    [0.0, 0.0, 0.0]
"""
import struct
from enum import Enum


class ValueKind(Enum):
    """storage kind carried by holders and descriptors."""
    BOOLEAN = "boolean"
    CHAR = "char"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    HELP = "help"
    DELIMITER = "delimiter"

    @classmethod
    def of(cls, kind):
        """
        resolve a kind given either as a ValueKind or as a builtin type.

        bool → BOOLEAN, int → LONG, float → DOUBLE, str → STRING.
        """
        if isinstance(kind, cls):
            return kind
        match kind:
            case builtins if builtins is bool:
                return cls.BOOLEAN
            case builtins if builtins is int:
                return cls.LONG
            case builtins if builtins is float:
                return cls.DOUBLE
            case builtins if builtins is str:
                return cls.STRING
        raise TypeError("holder kind must be a ValueKind or one of bool, int, float, str")

    @property
    def zero(self):
        match self:
            case ValueKind.BOOLEAN:
                return False
            case ValueKind.CHAR:
                return "\0"
            case ValueKind.INT | ValueKind.LONG:
                return 0
            case ValueKind.FLOAT | ValueKind.DOUBLE:
                return 0.0
        return None

    def coerce(self, value):
        match self:
            case ValueKind.INT:
                if not -(1 << 31) <= value < (1 << 31):
                    raise OverflowError("value out of range for int")
            case ValueKind.LONG:
                if not -(1 << 63) <= value < (1 << 63):
                    raise OverflowError("value out of range for long")
            case ValueKind.FLOAT:
                try:
                    return struct.unpack("f", struct.pack("f", value))[0]
                except OverflowError:
                    raise OverflowError("value out of range for float") from None
            case ValueKind.DOUBLE:
                return float(value)
        return value


class Holder:
    """
    Typed scalar cell.

    The engine writes `value` once per successful match; repeated matches of
    the same option overwrite it.
    """
    __slots__ = ("kind", "value")

    def __init__(self, kind, /, value=None):
        self.kind = ValueKind.of(kind)
        self.value = value

    def __repr__(self):
        return "holder(kind=%s, value=%r)" % (self.kind.value, self.value)

    def __eq__(self, other):
        if not isinstance(other, Holder):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    __hash__ = None


class Array:
    """
    Typed fixed-size sequence.

    The length is fixed at construction; slots start at the kind's zero value
    (None for strings) and are written by index.
    """
    __slots__ = ("kind", "_values")

    def __init__(self, kind, length, /):
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            raise ValueError("array length must be a non-negative integer")
        self.kind = ValueKind.of(kind)
        self._values = [self.kind.zero] * length

    def __len__(self):
        return len(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            raise TypeError("array slots cannot be resized")
        self._values[index] = value

    def __iter__(self):
        return iter(self._values)

    def __eq__(self, other):
        if isinstance(other, Array):
            return self.kind is other.kind and self._values == other._values
        if isinstance(other, list | tuple):
            return self._values == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "array(kind=%s, values=%r)" % (self.kind.value, self._values)


class Collector(list):
    """
    Growable sink for repeatable options.

    Each match appends an independent Holder (multiplier 1) or Array; values
    of earlier matches are never touched by later ones. A plain list works
    the same way.
    """

    def values(self):
        """flatten to the stored values (scalars, or lists for arrays)."""
        return [item.value if isinstance(item, Holder) else list(item) for item in self]


__all__ = (
    "ValueKind",
    "Holder",
    "Array",
    "Collector",
)
