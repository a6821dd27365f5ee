"""
ExtendScript source rendering.

Small typed layer for building ExtendScript (JSX) payloads in Python:
- ``literal()`` is the single serializer for values embedded in a script.
  Strings are always quoted and escaped, numbers are checked, lengths carry
  their unit suffix, lists and dicts become array/object literals.
- ``template()`` fills ``$NAME$`` placeholders exclusively through
  ``literal()``; a Python ``str`` can never be spliced in unescaped.
- ``Code`` marks a trusted source fragment (fixed enum members, nested
  clauses, the pass-through script) that is inserted verbatim.
- Optional clauses are dropped at render time: a placeholder bound to
  ``None`` removes its line, ``block()`` skips ``None`` parts.

Everything here is pure string work; nothing talks to InDesign.
"""

import json
import math
import re
import textwrap
from dataclasses import dataclass
from typing import Any

_PLACEHOLDER = re.compile(r"\$([A-Z][A-Z0-9_]*)\$")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_OMIT = "\x00"


class RenderError(ValueError):
    """A value or template cannot be turned into ExtendScript source."""


@dataclass(frozen=True)
class Code:
    """Trusted ExtendScript source, inserted without quoting."""

    text: str


@dataclass(frozen=True)
class Length:
    """A measurement rendered as a unit string, e.g. ``"12.5mm"``."""

    value: float
    unit: str


def mm(value: float) -> Length:
    return Length(value, "mm")


def pt(value: float) -> Length:
    return Length(value, "pt")


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------

def quote(text: str) -> str:
    """Return *text* as a double-quoted ExtendScript string literal.

    Quotes, backslashes, control characters, line separators and every
    non-ASCII character are escaped, so the literal reads back as exactly
    *text* and the surrounding payload stays plain ASCII.
    """
    return json.dumps(text, ensure_ascii=True)


def number(value: int | float) -> str:
    """Format a finite number; integral floats lose their ``.0``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RenderError(f"not a number: {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise RenderError(f"non-finite number: {value!r}")
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def literal(value: Any) -> str:
    """Render a Python value as an ExtendScript expression."""
    if isinstance(value, Code):
        return value.text
    if isinstance(value, Length):
        if not _IDENTIFIER.match(value.unit):
            raise RenderError(f"invalid unit: {value.unit!r}")
        return quote(number(value.value) + value.unit)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return number(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(literal(item) for item in value) + "]"
    if isinstance(value, dict):
        pairs = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise RenderError(f"object keys must be strings, got {key!r}")
            pairs.append(f"{quote(key)}: {literal(item)}")
        return "{" + ", ".join(pairs) + "}"
    raise RenderError(f"cannot render {type(value).__name__} as ExtendScript")


def enum_member(enum_name: str, member: str) -> Code:
    """Reference a DOM enumeration value, e.g. ``Justification.LEFT_ALIGN``."""
    for part in (enum_name, member):
        if not _IDENTIFIER.match(part):
            raise RenderError(f"invalid identifier: {part!r}")
    return Code(f"{enum_name}.{member}")


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

def template(source: str, /, **values: Any) -> Code:
    """Fill ``$NAME$`` placeholders in *source* and return the result as Code.

    Placeholders map to lower-case keyword arguments (``$PAGE_INDEX$`` ->
    ``page_index``).  Multi-line values keep the indentation of the line they
    are placed on.  A placeholder bound to ``None`` must stand on its own
    line; that line is dropped.

    Example::

        template('doc.layers.itemByName($NAME$).visible = $VISIBLE$;',
                 name='Text "A"', visible=False)
    """
    text = textwrap.dedent(source).strip("\n")
    used: set[str] = set()

    def _substitute(match: re.Match) -> str:
        key = match.group(1).lower()
        if key not in values:
            raise RenderError(f"no value for placeholder ${match.group(1)}$")
        used.add(key)
        value = values[key]
        if value is None:
            return _OMIT
        rendered = literal(value)
        if "\n" in rendered:
            line_start = text.rfind("\n", 0, match.start()) + 1
            prefix = text[line_start:match.start()]
            indent = prefix if not prefix.strip() else ""
            rendered = rendered.replace("\n", "\n" + indent)
        return rendered

    rendered = _PLACEHOLDER.sub(_substitute, text)

    unused = set(values) - used
    if unused:
        raise RenderError(f"unused template values: {sorted(unused)}")

    lines = []
    for line in rendered.split("\n"):
        if line.strip() == _OMIT:
            continue
        if _OMIT in line:
            raise RenderError("a placeholder bound to None must stand on its own line")
        lines.append(line)
    return Code("\n".join(lines))


def block(*parts: Code | None) -> Code | None:
    """Join clauses in order, skipping ``None``; ``None`` if nothing is left."""
    present = [part.text for part in parts if part is not None and part.text]
    if not present:
        return None
    return Code("\n".join(present))
