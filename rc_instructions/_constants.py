"""Common literal values used across rc_instructions.

Media extensions, markup snippets and token patterns live here so the parsers,
the converter and the tests agree on the exact strings.

Examples
--------
>>> from rc_instructions import _constants
>>> "mp4" in _constants.MEDIA_EXTENSIONS
True
>>> _constants.ELLIPSIS
'…'
"""

import re

MEDIA_EXTENSIONS = ("mp4", "mov", "webm", "png", "jpg", "jpeg", "gif", "svg")
MEDIA_EXTENSION_PATTERN = re.compile(
    rf"\.({'|'.join(MEDIA_EXTENSIONS)})([?#]|$)", re.IGNORECASE
)
VIDEO_EXTENSION_PATTERN = re.compile(r"\.mp4(\?|$)", re.IGNORECASE)

LEGACY_TOKEN_PATTERN = re.compile(
    r"\[\[TT\d+(?:\.\d+)*\]\]|\[\[SS[\d.]+\]\]|\[\[LL\d+\]\]", re.IGNORECASE
)
MARKDOWN_HEADING_PATTERN = re.compile(r"^#{1,6}\s+.+$", re.MULTILINE)
MARKDOWN_LIST_PATTERN = re.compile(r"^[ \t]*(\d+\.|-|\*|\+)[ \t]+.+$", re.MULTILINE)

HEADING_TEMPLATE = '<h{level} style="margin: 0.5em 0;">{text}</h{level}>'
CODE_BLOCK_TEMPLATE = (
    '<pre style="background: #f5f5f5; padding: 1rem; border-radius: 4px; '
    'overflow-x: auto;"><code{language}>{code}</code></pre>'
)
CODE_LANGUAGE_ATTRIBUTE = ' class="language-{language}"'
HR_MARKUP = '<hr style="border: 0; border-top: 1px solid #ddd; margin: 1rem 0;">'
BLOCKQUOTE_TEMPLATE = (
    '<blockquote style="border-left: 3px solid #ddd; padding-left: 1rem; '
    'margin: 0.5rem 0; color: #666;">{text}</blockquote>'
)
CHECKBOX_CHECKED = (
    '<input type="checkbox" checked disabled style="margin-right: 0.5rem;">'
)
CHECKBOX_UNCHECKED = '<input type="checkbox" disabled style="margin-right: 0.5rem;">'
ANCHOR_TEMPLATE = (
    '<a href="{href}" target="_blank" rel="noopener noreferrer">{text}</a>'
)
LINE_BREAK = "<br>"
ELLIPSIS = "…"
MARKDOWN_PHRASE_SUFFIX = "_MD"
