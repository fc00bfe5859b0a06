"""
Argmatch token helpers: turn text into argument tokens.

- split_args(text): whitespace-separated words; double-quoted strings may
  contain whitespace and backslash escapes.
- prepend_args(source, args): read an argument file (a path or an open text
  stream), drop "#" comments up to the end of each line, and return the
  file's tokens followed by args. A missing or unreadable path is not an
  error: args is returned unchanged. A file that fails while being read
  (I/O error, invalid UTF-8) raises ArgumentFileError naming the file.
"""
import os

from .faults import ArgumentFileError, FaultCode, ScanError
from .scanner import Scanner


def split_args(text, /, *, quoted=True):
    """split text into tokens (ScanError on an unterminated quoted string)."""
    if not isinstance(text, str):
        raise TypeError("split_args() argument must be a string")
    if not quoted:
        return text.split()
    scanner = Scanner(text)
    tokens = []
    scanner.skip_whitespace()
    while not scanner.at_end():
        tokens.append(scanner.scan_string())
        scanner.skip_whitespace()
    return tokens


def _read(lines, name=None):
    tokens = []
    for number, line in enumerate(lines, 1):
        line, _, _ = line.partition("#")
        try:
            tokens.extend(split_args(line))
        except ScanError:
            message = "malformed string, line %d" % number
            if name is not None:
                message = "file %s: %s" % (name, message)
            raise ArgumentFileError(
                message,
                code=FaultCode.MALFORMED_ARGUMENT_FILE,
                title="malformed argument file",
                line=number,
                **({"file": name} if name is not None else {})
            ) from None
    return tokens


def prepend_args(source, args=(), /):
    """
    Return the tokens read from source followed by args.

    source is a filesystem path (str or os.PathLike) or an iterable of text
    lines such as an open file.
    """
    args = list(args)
    if isinstance(source, str | os.PathLike):
        path = os.fspath(source)
        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            return args
        name = os.path.basename(path)
        try:
            with open(path, encoding="utf-8") as stream:
                return _read(stream, name) + args
        except (OSError, UnicodeDecodeError) as error:
            raise ArgumentFileError(
                "file %s: %s" % (name, getattr(error, "strerror", None) or error),
                code=FaultCode.MALFORMED_ARGUMENT_FILE,
                title="unreadable argument file",
                file=name
            ) from None
    return _read(source) + args


__all__ = (
    "split_args",
    "prepend_args",
)
