"""
Argmatch shell layer: the only place that prints and exits.

run() expands an optional argument file, matches the tokens and, in shell
mode, turns terminal faults into console output and an exit status:
- HelpRequested: help text on stdout, exit status 0.
- any other ArgumentException: rendered on stderr (with a pointer to the
  help option when one is enabled), exit status 1.
Outside shell mode the same faults are raised to the caller.

Quick example:
    >>> parser = ArgParser("demo [options]")
    >>> verbose = Holder(bool)
    >>> parser.register("-v,--verbose %v #talk more", verbose)
    >>> rest = run(parser, config=".demorc")
"""
import os
import sys

from .faults import ArgumentException, HelpRequested, trigger
from .parser import Halt
from .tokens import prepend_args
from .utils import Unset, coalesce


def run(parser, tokens=Unset, /, *, config=Unset, halt=Halt.ALWAYS, shell=True, colorful=True):
    """
    Match tokens (default: sys.argv[1:]) against parser.

    Parameters
    - config: path or text stream whose tokens are prepended to tokens.
    - halt: Halt policy handed to ArgParser.match_all().
    - shell: print and exit on terminal faults instead of raising them.
    - colorful: style rendered faults.

    Returns the unmatched tokens, or None.
    """
    tokens = list(coalesce(tokens, sys.argv[1:]))
    options = {
        "shell": shell,
        "colorful": colorful,
        "prog": os.path.basename(sys.argv[0]) or "argmatch",
    }
    try:
        if config is not Unset:
            tokens = prepend_args(config, tokens)
        return parser.match_all(tokens, halt=halt)
    except HelpRequested as fault:
        trigger(fault, **options)
    except ArgumentException as fault:
        hints = [fault.options.get("hint")]
        if parser.help_enabled and parser.first_help_name is not None:
            hints.append("use %s for help information" % parser.first_help_name)
        hint = "; ".join(filter(None, hints))
        trigger(fault, **options, **({"hint": hint} if hint else {}))


__all__ = (
    "run",
)
