r"""
Argmatch matching engine.

Overview
- ArgParser keeps the ordered list of compiled descriptors. Declaration order
  is authoritative for both matching priority and help output.
- match_one(tokens, index) matches the token at index and returns the index
  where the next match should begin.
- match_all(tokens, index, halt=...) drives match_one over the whole list
  under an explicit Halt policy and returns the unmatched tokens (or None).

Matching rules
- lookup: the first descriptor owning an alias that matches the token wins;
  single-word aliases match by prefix, all others by equality.
- help (%h): raises HelpRequested carrying the rendered help text, unless
  help options are disabled (then the token is simply unmatched).
- flags (%v): store the descriptor default in every slot, consume nothing.
- single-word aliases: the value is the rest of the token.
- multi-word aliases: the next `multiplicity` tokens are the values.
- %b (multi-word, multiplicity 1): a following token that is not a boolean
  is left alone and the option stores True; so does end of input.
- collectors receive one fresh Holder/Array per match.

State
- error: the MatchError raised by the last match_one() call, or None.
- unmatched: the token the last match_one() call could not match, or None.
Both are cleared on every call; they are single-slot and not thread-safe.

Quick example:
    >>> debug, size = Holder(bool), Holder(ValueKind.INT)
    >>> parser = ArgParser("prog [options]")
    >>> parser.register("-debug %v #enables debug output", debug)
    >>> parser.register("-size %d {1,2,4,8,16} #block size", size)
    >>> parser.match_all(["-debug", "-size", "4", "extra"], halt=Halt.NEVER)
    ['extra']
    >>> debug.value, size.value
    (True, 4)
"""
import difflib
from enum import IntFlag

from .faults import *
from .helps import render_help
from .holders import ValueKind, Holder
from .specs import Descriptor, compile_spec
from .utils import view

DEFAULT_HELP = "--help,-? %h #displays help information"


class Halt(IntFlag):
    """what match_all() refuses to continue past."""
    NEVER = 0
    ON_ERROR = 1
    ON_UNMATCHED = 2
    ALWAYS = ON_ERROR | ON_UNMATCHED


def _store(result, slot, value):
    if isinstance(result, Holder):
        result.value = value
    else:
        result[slot] = value


class ArgParser:
    """
    Registry of compiled options plus the matching engine over them.

    Parameters
    - synopsis: str, first line of the help text ("Usage: <synopsis>").
    - default_help: bool, register "--help,-? %h" up front. A help option
      registered later replaces it in place.
    - help_enabled: bool, whether help options match and show in help.
    - indent/columns: help layout (help text column and total width).

    synopsis, help_enabled, indent and columns stay assignable afterwards.
    """
    descriptors = view("descriptors")
    error = view("error")
    unmatched = view("unmatched")

    def __init__(self, synopsis, /, *, default_help=True, help_enabled=True, indent=6, columns=80):
        if not isinstance(synopsis, str):
            raise TypeError("ArgParser() synopsis must be a string")
        for name, value in (("indent", indent), ("columns", columns)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError("ArgParser() %s must be an integer" % name)
            if value < 0:
                raise ValueError("ArgParser() %s must be non-negative" % name)
        self.synopsis = synopsis
        self.help_enabled = help_enabled
        self.indent = indent
        self.columns = columns
        self._descriptors = []
        self._error = None
        self._unmatched = None
        self._default_help = None
        self._first_help = None
        if default_help:
            self._default_help = compile_spec(DEFAULT_HELP)
            self._adopt(self._default_help)

    def __repr__(self):
        return "parser(synopsis=%r, descriptors=%d)" % (self.synopsis, len(self._descriptors))

    @property
    def first_help_name(self):
        """name of the first alias of the active help option, if any."""
        if self._first_help is None:
            return None
        return self._first_help.aliases[0].name

    def _adopt(self, descriptor):
        """
        append descriptor, or let a help option take the default's place.

        only the first help option registered while the default is active
        replaces it; later ones are appended like any other descriptor.
        """
        if descriptor.kind is ValueKind.HELP and self._first_help is self._default_help:
            if self._default_help is None:
                self._descriptors.append(descriptor)
            else:
                self._descriptors[self._descriptors.index(self._default_help)] = descriptor
            self._first_help = descriptor
        else:
            self._descriptors.append(descriptor)

    def register(self, spec, sink=None, /, visible=True):
        """
        Compile spec against sink and add it to the parser.

        Raises SpecificationError (nothing is registered). Aliases already
        owned by an earlier option emit a DuplicateAliasWarning; the earlier
        option keeps matching first.
        """
        descriptor = compile_spec(spec, sink, visible=visible)
        replaced = self._default_help if descriptor.kind is ValueKind.HELP and self._first_help is self._default_help else None
        for alias in descriptor.aliases:
            for other in self._descriptors:
                if other is not replaced and any(alias.name == name for name, _ in other.aliases):
                    trigger(DuplicateAliasWarning(
                        "alias %r is already declared by %s" % (alias.name, ", ".join(name for name, _ in other.aliases)),
                        code=FaultCode.DUPLICATE_ALIAS,
                        title="duplicate alias",
                        alias=alias.name
                    ))
                    break
        self._adopt(descriptor)
        return descriptor

    def add_delimiter(self, text, /):
        """add a heading line to the help output."""
        descriptor = Descriptor.delimiter(text)
        self._descriptors.append(descriptor)
        return descriptor

    def find(self, token, /):
        """return (descriptor, alias) for the first match of token, or None."""
        for descriptor in self._descriptors:
            if (alias := descriptor.matches(token)) is not None:
                return descriptor, alias
        return None

    def help_message(self):
        return render_help(
            self.synopsis,
            self._descriptors,
            help_enabled=self.help_enabled,
            indent=self.indent,
            columns=self.columns
        )

    def match_one(self, tokens, index=0, /):
        """
        Match the token at index and return the index of the next token.

        Unmatched tokens are recorded in `unmatched` and skipped. Match errors
        are recorded in `error` and raised; help requests raise HelpRequested.
        """
        self._unmatched = None
        self._error = None
        token = tokens[index]
        found = self.find(token)
        if found is None or (found[0].kind is ValueKind.HELP and not self.help_enabled):
            self._unmatched = token
            return index + 1
        descriptor, alias = found
        if descriptor.kind is ValueKind.HELP:
            raise HelpRequested(
                self.help_message(),
                code=FaultCode.HELP_REQUESTED,
                title="help requested",
                alias=alias.name,
                token=token
            )
        try:
            index = self._consume(descriptor, alias, tokens, index)
        except MatchError as error:
            self._error = error
            raise
        return index + 1

    def _consume(self, descriptor, alias, tokens, index):
        result = descriptor.allocate() if descriptor.collects else descriptor.sink
        name = alias.name
        count = descriptor.multiplicity
        if descriptor.code == "v":
            for slot in range(count):
                _store(result, slot, descriptor.default)
        elif alias.single:
            _store(result, 0, descriptor.scan(name, tokens[index][len(name):]))
        elif descriptor.code != "b" or count > 1:
            if index + count >= len(tokens):
                raise MissingValuesError(
                    "%s: requires %d value%s" % (name, count, "s" if count > 1 else ""),
                    code=FaultCode.MISSING_VALUES,
                    title="missing values",
                    alias=name,
                    token=tokens[index]
                )
            for slot in range(count):
                index += 1
                _store(result, slot, descriptor.scan(name, tokens[index]))
        elif index + 1 >= len(tokens):
            _store(result, 0, True)
        else:
            try:
                _store(result, 0, descriptor.scan(name, tokens[index + 1]))
                index += 1
            except MalformedValueError as error:
                # Not a boolean: the option was given as a bare flag.
                if error.kind is not ValueKind.BOOLEAN:
                    raise
                _store(result, 0, True)
        if descriptor.collects:
            descriptor.sink.append(result)
        return index

    def match_all(self, tokens, index=0, /, *, halt):
        """
        Match every token from index on.

        halt is required:
        - Halt.ON_ERROR: match errors propagate; otherwise the pass stops at the
          first error, which stays available on `error`.
        - Halt.ON_UNMATCHED: the first unmatched token raises
          UnmatchedArgumentError; otherwise unmatched tokens are collected.

        Returns the unmatched tokens in order, or None when there are none.
        Without Halt.ON_ERROR a pass stopped by a match error returns the
        same way, so None alone does not mean success: check `error`.
        """
        halt = Halt(halt)
        unmatched = []
        while index < len(tokens):
            try:
                index = self.match_one(tokens, index)
            except MatchError:
                if halt & Halt.ON_ERROR:
                    raise
                break
            if self._unmatched is None:
                continue
            if halt & Halt.ON_UNMATCHED:
                names = [alias.name for descriptor in self._descriptors for alias in descriptor.aliases]
                suggestions = difflib.get_close_matches(self._unmatched, names, 1)
                raise UnmatchedArgumentError(
                    "unrecognized argument: %s" % self._unmatched,
                    code=FaultCode.UNMATCHED_ARGUMENT,
                    title="unrecognized argument",
                    token=self._unmatched,
                    **({"hint": "did you mean %r?" % suggestions[0]} if suggestions else {})
                )
            unmatched.append(self._unmatched)
        return unmatched or None


__all__ = (
    "ArgParser",
    "Halt",
    "DEFAULT_HELP",
)
