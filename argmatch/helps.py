"""
Argmatch help formatter.

Layout (per visible descriptor, in declaration order)
    <aliases> <value>[X<n>]<pad><help text, wrapped>

- aliases are joined with ", "; of two consecutive aliases sharing a common
  prefix longer than 2 characters and differing by exactly one trailing
  character, the second is dropped ("--verbose, --verbos" renders once).
- the value placeholder is the explicit value text when given, else
  "<type range>" or "<type>"; flags and help options have none.
- help text starts at column `indent` (on the next line when the option
  column is too wide) and wraps before `columns - indent` characters, with
  continuation lines indented by `indent`.
- delimiters render as a bare line surrounded by line breaks.

Rendering is a pure function of the descriptor list and the layout config.
"""
from .holders import ValueKind


def common_prefix(a, b, /):
    """longest common prefix of a and b (case-sensitive)."""
    index = 0
    for x, y in zip(a, b):
        if x != y:
            break
        index += 1
    return a[:index]


def insert_line_breaks(message, width, /, symbol="\n", pad="", before=True):
    """
    Re-flow message into lines of at most `width` characters.

    Words are split on single spaces (runs of spaces collapse). A break is
    inserted once the current line reached `width`, or, with `before`, when
    the next word would reach it. `pad` prefixes every continuation line and
    is not counted in the width. Words that already contain `symbol` restart
    the count after it.
    """
    words = [word for word in (message or "").split(" ") if word]
    if not words:
        return ""
    lines = [words[0]]
    length = len(words[0])
    for word in words[1:]:
        if length >= width or (before and length + len(word) >= width):
            lines.append(symbol + pad)
            length = 0
        else:
            lines.append(" ")
        lines.append(word)
        if (position := word.find(symbol)) >= 0:
            length = len(word) - position - len(symbol)
        else:
            length += len(word) + 1
    return "".join(lines)


def _redundant(current, following):
    prefix = common_prefix(following, current)
    return len(prefix) > 2 and (len(current) - len(prefix) == 1 or len(following) - len(prefix) == 1)


def _names(descriptor):
    kept = []
    for alias in descriptor.aliases:
        if kept and _redundant(kept[-1].name, alias.name):
            continue
        kept.append(alias)
    single = any(alias.single for alias in descriptor.aliases)
    names = ", ".join(alias.name + (" " if single and not alias.single else "") for alias in kept)
    if not single:
        names += " "
    return names


def _value(descriptor):
    if descriptor.code in ("v", "h"):
        return ""
    if descriptor.value_text is not None:
        return descriptor.value_text
    if descriptor.range_text is not None:
        return "<%s %s>" % (descriptor.type_name, descriptor.range_text)
    return "<%s>" % descriptor.type_name


def render_help(synopsis, descriptors, /, help_enabled=True, indent=6, columns=80):
    """render the full usage text for descriptors."""
    out = ["Usage: %s\n" % synopsis, "Options include:\n\n"]
    for descriptor in descriptors:
        if not descriptor.visible:
            continue
        if descriptor.kind is ValueKind.HELP and not help_enabled:
            continue
        if descriptor.kind is ValueKind.DELIMITER:
            out.append("\n%s\n" % descriptor.help_text)
            continue
        info = _names(descriptor) + _value(descriptor)
        if descriptor.multiplicity > 1:
            info += "X%d" % descriptor.multiplicity
        out.append(info)
        if descriptor.help_text:
            pad = indent - len(info)
            if pad < 2:
                out.append("\n")
                pad = indent
            out.append(" " * pad)
            out.append(insert_line_breaks(descriptor.help_text, columns - indent, "\n", " " * indent, True))
        out.append("\n")
    return "".join(out)


__all__ = (
    "common_prefix",
    "insert_line_breaks",
    "render_help",
)
