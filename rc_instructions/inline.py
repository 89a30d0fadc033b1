r"""Convert inline Markdown emphasis into HTML fragments.

The formatter handles the small inline subset instruction authors use:
headings at the start of a line, backslash escapes, bold, italic, inline
code, strikethrough and line breaks. Running it over text that already holds
one of its own output tags returns the text untouched, so callers can format
a string more than once without double-escaping it.

Example
-------
>>> from rc_instructions.inline import format_inline
>>> format_inline("This is **bold** and *italic*")
'This is <strong>bold</strong> and <em>italic</em>'
>>> format_inline(format_inline("**bold**"))
'<strong>bold</strong>'
"""

from __future__ import annotations

import re

from ._constants import HEADING_TEMPLATE, LINE_BREAK

FORMATTED_TAG_PATTERN = re.compile(r"<(strong|em|code|del|h[1-6])\b", re.IGNORECASE)
HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
ESCAPE_PATTERN = re.compile(r"\\([\\`*_{}\[\]()#+\-.!])")
BR_TAG_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)
HTML_TAG_PATTERN = re.compile(r"<[^<>\n]+>")
PRIVATE_USE_RANGE = range(0xE000, 0xF900)

_INLINE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\*\*([^*]+)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"__([^_]+)__"), r"<strong>\1</strong>"),
    (re.compile(r"\*([^*]+)\*"), r"<em>\1</em>"),
    (re.compile(r"_([^_]+)_"), r"<em>\1</em>"),
    (re.compile(r"`([^`]+)`"), r"<code>\1</code>"),
    (re.compile(r"~~([^~]+)~~"), r"<del>\1</del>"),
)


def is_formatted(text: str) -> bool:
    """Return ``True`` when ``text`` already contains formatter output tags."""
    return bool(FORMATTED_TAG_PATTERN.search(text))


def _heading(match: re.Match[str]) -> str:
    level = len(match.group(1))
    return HEADING_TEMPLATE.format(level=level, text=match.group(2))


def _escape(match: re.Match[str]) -> str:
    """Replace an escaped markup character with its numeric entity."""
    return f"&#{ord(match.group(1))};"


def _unused_marker(text: str) -> str | None:
    """Return a private-use character that does not occur in ``text``."""
    for codepoint in PRIVATE_USE_RANGE:
        marker = chr(codepoint)
        if marker not in text:
            return marker
    return None


def _apply_rules(text: str) -> str:
    result = HEADING_PATTERN.sub(_heading, text)
    result = ESCAPE_PATTERN.sub(_escape, result)
    for pattern, replacement in _INLINE_RULES:
        result = pattern.sub(replacement, result)
    return result.replace("  \n", LINE_BREAK)


def format_inline(text: object) -> str:
    """Render inline Markdown in ``text`` as HTML.

    Parameters
    ----------
    text : object
        Source text. Anything other than ``str`` yields ``""``.

    Returns
    -------
    str
        The formatted fragment, or ``text`` unchanged when it already carries
        ``strong``/``em``/``code``/``del``/``h1``-``h6`` tags.

    Notes
    -----
    HTML tags already present in the input (for example anchors produced by
    :func:`rc_instructions.media.extract_media`) are shielded from the
    emphasis rules so attribute values such as ``href`` survive intact. The
    placeholders use a private-use character absent from the input, so any
    character the caller supplies passes through unchanged.
    """
    if not isinstance(text, str):
        return ""
    if is_formatted(text):
        return text

    result = BR_TAG_PATTERN.sub(LINE_BREAK, text)
    marker = _unused_marker(result)
    if marker is None:
        return _apply_rules(result)

    shielded: list[str] = []

    def _shield(match: re.Match[str]) -> str:
        shielded.append(match.group(0))
        return f"{marker}{len(shielded) - 1}{marker}"

    def _restore(match: re.Match[str]) -> str:
        return shielded[int(match.group(1))]

    result = _apply_rules(HTML_TAG_PATTERN.sub(_shield, result))
    placeholder = re.compile(rf"{re.escape(marker)}(\d+){re.escape(marker)}")
    return placeholder.sub(_restore, result)


__all__ = ["format_inline", "is_formatted"]
