r"""Rewrite legacy token phrases as Markdown source.

This is a migration aid for authors moving phrases to the Markdown grammar.
It is line oriented and lossy: step numbers are renumbered sequentially and
the nesting encoded in dotted legacy numbers is dropped.

Example
-------
>>> from rc_instructions.converter import convert_legacy_to_markdown
>>> legacy = "[[TT1]] Setup\n[[SS1]] Step one\n[[LL1]]\n[[SS2]] Step two"
>>> print(convert_legacy_to_markdown(legacy, {"LL1": "video.mp4"}))
# Setup
<BLANKLINE>
1. Step one
![](video.mp4)
<BLANKLINE>
2. Step two
"""

from __future__ import annotations

import re
import typing as typ

from .legacy_parser import LINE_SPLIT_PATTERN, resolve_link

TITLE_LINE_PATTERN = re.compile(r"^\[\[TT\d+(?:\.\d+)*\]\]\s*(.*)$", re.IGNORECASE)
LINK_LINE_PATTERN = re.compile(r"^\[\[LL(\d+)\]\]$", re.IGNORECASE)
STEP_LINE_PATTERN = re.compile(r"^\[\[SS[\d.]+\]\]\s*(.*)$", re.IGNORECASE)


def convert_legacy_to_markdown(
    token_text: str, link_map: typ.Mapping[str, str] | None = None
) -> str:
    """Convert ``[[TT]]``/``[[SS]]``/``[[LL]]`` text into Markdown.

    Parameters
    ----------
    token_text : str
        Legacy phrase text. Non-string input yields ``""``.
    link_map : Mapping[str, str], optional
        Resolves ``LLn`` keys; unresolved links are omitted from the output.

    Returns
    -------
    str
        Markdown with one ``#`` heading per title token, one image line per
        resolved link and a sequentially numbered list item per step. Other
        non-blank lines pass through stripped.
    """
    if not isinstance(token_text, str):
        return ""

    output: list[str] = []
    step_counter = 0
    for raw in LINE_SPLIT_PATTERN.split(token_text):
        line = raw.strip()
        if not line:
            continue
        if match := TITLE_LINE_PATTERN.match(line):
            output.extend((f"# {match.group(1)}", ""))
        elif match := LINK_LINE_PATTERN.match(line):
            url = resolve_link(match.group(1), link_map)
            if url:
                output.extend((f"![]({url})", ""))
        elif match := STEP_LINE_PATTERN.match(line):
            step_counter += 1
            output.append(f"{step_counter}. {match.group(1)}")
        else:
            output.append(line)
    return "\n".join(output)


__all__ = ["convert_legacy_to_markdown"]
