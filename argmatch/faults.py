"""
Argmatch faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the
  compiler, scanner and matching engine can report.
- ArgumentException / ArgumentWarning: base types that carry message + options
  and know how to render themselves (rich), copy themselves with overrides
  (__replace__) and surface themselves (__trigger__).
- trigger(): central entry point to surface any fault.

Propagation
- The core only raises. Specification errors are programmer errors and always
  propagate from registration; match errors propagate from the engine unless
  the caller's halt policy collects them.
- Printing and exiting happen only when a fault is triggered with shell=True,
  which is what the outer shell layer does.

Error anatomy
- message: one line, prefixed by the offending alias for match errors
  (e.g. "-size: value '3' not in range {1,2,4,8,16}").
- options: immutable mapping with at least `code` and `title`; match errors
  add `alias` and `token`, scan errors add `index`.
"""
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by domain)
    - specification (21xxx): raised by compile_spec()/ArgParser.register()
    - scanning (31xxx): raised by the Scanner and by argument file expansion
    - matching (32xxx): raised by ArgParser.match_one()
    - control flow (41xxx): unmatched arguments and help requests
    - warnings (51xxx)

    normalize() allows the host to remap codes to custom labels through a
    __codes__ mapping in __main__.
    """
    # --- specification errors (21xxx) ---
    NULL_OPTION_NAME            = 21101
    MISSING_CONVERSION          = 21102
    NAMES_NOT_SEPARATED         = 21103
    INVALID_CONVERSION          = 21104
    INVALID_RESULT_HOLDER       = 21105
    UNSUPPORTED_RANGE           = 21111
    MALFORMED_RANGE             = 21112
    UNSUPPORTED_MULTIPLIER      = 21121
    MALFORMED_MULTIPLIER        = 21122
    SINGLE_WORD_MULTIPLIER      = 21123
    SHORT_RESULT_HOLDER         = 21124
    ILLEGAL_CHARACTERS          = 21131

    # --- scanning errors (31xxx) ---
    MALFORMED_LITERAL           = 31101
    MALFORMED_ARGUMENT_FILE     = 31102

    # --- matching errors (32xxx) ---
    MISSING_VALUES              = 32101
    EMPTY_VALUE                 = 32102
    MALFORMED_VALUE             = 32103
    OUT_OF_RANGE                = 32104
    VALUE_OVERFLOW              = 32105

    # --- control flow (41xxx) ---
    UNMATCHED_ARGUMENT          = 41101
    HELP_REQUESTED              = 41102

    # --- warnings (51xxx) ---
    DUPLICATE_ALIAS             = 51101

    def normalize(self):
        """
        return a host-normalized string for this code.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
        [ <prog> — <code> | <Title> ]
        <message>
         → <hint>
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    header = Text.assemble(
        "[ ",
        text(fault.options.get("prog", "argmatch"), "prog-name"),
        " — ",
        text(code.normalize() if (code := fault.options.get("code")) is not None else "-", "code"),
        " | ",
        text(fault.options.get("title", "").title(), "title"),
        " ]"
    )
    renders = [header, text(fault.message, "message")]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
    return Group(*renders)


class ArgumentException(Exception):
    """
    base type for every error raised by argmatch.

    str(fault) is the plain message; fault.options carries structured context.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }
    __status__ = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, self.__palette__)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(self.__status__)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SpecificationError(ArgumentException, ValueError):
    """malformed option specification or incompatible result holder."""


class ScanError(ArgumentException):
    """
    a literal could not be scanned.

    index is the position of the offending character in the scanned string.
    """

    @property
    def index(self):
        return self.options.get("index", 0)


class MatchError(ArgumentException):
    """base type for errors raised while consuming an option's values."""

    @property
    def alias(self):
        return self.options.get("alias")

    @property
    def token(self):
        return self.options.get("token")


class MissingValuesError(MatchError): ...
class EmptyValueError(MatchError): ...
class OutOfRangeError(MatchError): ...
class ValueOverflowError(MatchError): ...


class MalformedValueError(MatchError):
    """
    a value token does not scan as the option's type.

    kind is the ValueKind that failed to scan; the engine inspects it to
    decide the boolean flag fallback.
    """

    @property
    def kind(self):
        return self.options.get("kind")


class ArgumentFileError(ArgumentException):
    """an argument file line could not be split into tokens."""

    @property
    def line(self):
        return self.options.get("line")

    @property
    def file(self):
        return self.options.get("file")


class UnmatchedArgumentError(ArgumentException):
    """raised only when the caller's halt policy refuses unmatched tokens."""


class HelpRequested(ArgumentException):
    """
    terminal signal raised when an enabled help option is matched.

    the message is the rendered help text. in shell mode it is printed to
    stdout and the process exits with status 0.
    """
    __status__ = 0

    def __rich__(self):
        return Text(self.message)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        Console(highlight=False).print(self.message, markup=False, soft_wrap=True, end="")
        sys.exit(self.__status__)


class ArgumentWarning(Warning):
    """base type for soft diagnostics."""
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, self.__palette__)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            # __trigger__ <- trigger() <- ArgParser.register() <- caller
            return warnings.warn(self, stacklevel=4)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateAliasWarning(ArgumentWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise
      exceptions are raised and warnings go through the warnings module.
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
    "ArgumentException",
    "SpecificationError",
    "ScanError",
    "MatchError",
    "MissingValuesError",
    "EmptyValueError",
    "MalformedValueError",
    "OutOfRangeError",
    "ValueOverflowError",
    "ArgumentFileError",
    "UnmatchedArgumentError",
    "HelpRequested",
    "ArgumentWarning",
    "DuplicateAliasWarning",
    "trigger",
)
