r"""Pull image and media-link references out of Markdown text.

Image syntax (``![alt](url)``) is removed from the text and its URL captured.
Link syntax (``[text](url)``) pointing at a media file keeps only the link
text and captures the URL; any other link becomes an HTML anchor that opens in
a new browsing context. URLs may contain one level of balanced parentheses,
which matters for uploaded files such as ``Instruction 4 (Revis 2).mp4``.

Example
-------
>>> from rc_instructions.media import extract_media
>>> result = extract_media("Step 1 ![demo](video.mp4) instructions")
>>> result.clean_text, result.urls
('Step 1  instructions', ['video.mp4'])
>>> extract_media("![x](path (copy).mp4)").urls
['path (copy).mp4']
"""

from __future__ import annotations

import dataclasses as dc
import re
from html import escape

from ._constants import ANCHOR_TEMPLATE, MEDIA_EXTENSION_PATTERN

_URL_BODY = r"([^()]*(?:\([^()]*\)[^()]*)*)"
IMAGE_PATTERN = re.compile(rf"!\[([^\]]*)\]\({_URL_BODY}\)")
LINK_PATTERN = re.compile(rf"\[([^\]]*)\]\({_URL_BODY}\)")


@dc.dataclass(slots=True)
class MediaExtraction:
    """Text with media references removed, plus the URLs found.

    Attributes
    ----------
    clean_text : str
        Input with image syntax removed, media links reduced to their text and
        other links rewritten as anchors; surrounding whitespace is stripped.
    urls : list[str]
        Media URLs in order of appearance.
    """

    clean_text: str
    urls: list[str] = dc.field(default_factory=list)


def is_media_url(url: str) -> bool:
    """Return ``True`` when ``url`` ends in a known video or image extension."""
    return bool(MEDIA_EXTENSION_PATTERN.search(url))


def extract_media(text: str) -> MediaExtraction:
    """Separate media references from ``text``.

    Parameters
    ----------
    text : str
        Markdown fragment, typically a list item or a standalone line.

    Returns
    -------
    MediaExtraction
        Cleaned text and the captured URLs. URLs are ordered by position in
        ``text`` even when images and media links are interleaved.
    """
    found: list[tuple[int, str]] = []

    def _rewrite_links(segment: str, offset: int) -> str:
        def _link(match: re.Match[str]) -> str:
            link_text, url = match.group(1), match.group(2)
            if is_media_url(url):
                found.append((offset + match.start(), url.strip()))
                return link_text
            return ANCHOR_TEMPLATE.format(href=escape(url, quote=True), text=link_text)

        return LINK_PATTERN.sub(_link, segment)

    # Links are only searched between images, never inside them.
    pieces: list[str] = []
    position = 0
    for match in IMAGE_PATTERN.finditer(text):
        pieces.append(_rewrite_links(text[position : match.start()], position))
        found.append((match.start(), match.group(2).strip()))
        position = match.end()
    pieces.append(_rewrite_links(text[position:], position))

    found.sort(key=lambda item: item[0])
    cleaned = "".join(pieces)
    return MediaExtraction(clean_text=cleaned.strip(), urls=[url for _, url in found])


__all__ = [
    "IMAGE_PATTERN",
    "LINK_PATTERN",
    "MediaExtraction",
    "extract_media",
    "is_media_url",
]
