from __future__ import annotations

import re
import warnings

from bs4 import (
    BeautifulSoup,
    FeatureNotFound,
    NavigableString,
    Tag,
    XMLParsedAsHTMLWarning,
)  # type: ignore

from .furigana import Furigana
from .logging_utils import debug_log
from .parse import FuriganaParseError
from .segments import Kana, Kanji, Segment, encode_segments

__all__ = ["furigana_from_ruby_html", "ruby_segments"]

SKIPPED_TAGS = ("rp", "script", "style")

# Literal brackets in running text would otherwise open a bracket group.
_BRACKET_ESCAPES = str.maketrans({"[": "［", "]": "］"})
_NEWLINE_WS_RE = re.compile(r"\s*\n\s*")
_INLINE_WS_RE = re.compile(r"[ \t]+")


def _soup_from_html(html: str) -> BeautifulSoup:
    stripped = html.lstrip()
    if stripped.startswith("<?xml"):
        try:
            return BeautifulSoup(html, "lxml-xml")
        except FeatureNotFound:
            pass
    for parser in ("lxml", "html.parser"):
        try:
            with warnings.catch_warnings():
                warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
                return BeautifulSoup(html, parser)
        except FeatureNotFound:
            continue
    return BeautifulSoup(html, "html.parser")


def _normalize_ws(text: str) -> str:
    return "".join(text.split())


def _tag_text(tag: Tag) -> str:
    return _normalize_ws("".join(tag.stripped_strings))


def _ruby_base_text(ruby: Tag) -> str:
    """
    Extract base text from <ruby>, ignoring <rt>/<rp>. Supports legacy and <rb>.
    """
    rbs = ruby.find_all("rb", recursive=False)
    if rbs:
        return "".join(_tag_text(rb) for rb in rbs)
    parts = []
    for child in ruby.children:
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag) and child.name not in ("rt", "rp"):
            parts.append("".join(child.stripped_strings))
    return _normalize_ws("".join(parts))


def ruby_segments(ruby: Tag) -> list[Segment]:
    """
    Convert one <ruby> element to segments.

    Paired <rb>/<rt> elements of single characters become one kanji segment
    with a reading per character; longer <rb> bases get a segment each.
    Otherwise the whole base shares the concatenated <rt> text. A ruby
    without a usable reading degrades to its base text.
    """
    rbs = [_tag_text(rb) for rb in ruby.find_all("rb", recursive=False)]
    rts = [_tag_text(rt) for rt in ruby.find_all("rt", recursive=False)]
    base = _ruby_base_text(ruby)
    reading = "".join(rts)
    if not base:
        debug_log(f"ruby without base text skipped (reading={reading!r})")
        return []
    try:
        if len(rbs) > 1 and len(rbs) == len(rts) and all(rbs) and all(rts):
            if all(len(rb) == 1 for rb in rbs):
                return [Kanji.multi("".join(rbs), rts)]
            return [Kanji.single(rb, rt) for rb, rt in zip(rbs, rts)]
        if reading:
            return [Kanji.single(base, reading)]
    except FuriganaParseError as exc:
        debug_log(f"ruby {base!r} kept as plain text: {exc}")
    return [Kana(base.translate(_BRACKET_ESCAPES))]


def _collapse_ws(text: str) -> str:
    text = _NEWLINE_WS_RE.sub("", text)
    return _INLINE_WS_RE.sub(" ", text).strip()


def furigana_from_ruby_html(html: str) -> Furigana:
    """Convert HTML with <ruby> annotations into bracket notation."""
    soup = _soup_from_html(html)
    for tag in soup.find_all(SKIPPED_TAGS):
        tag.decompose()
    for node in list(soup.find_all(string=True)):
        if type(node) is not NavigableString or node.find_parent("ruby") is not None:
            continue
        text = str(node)
        escaped = text.translate(_BRACKET_ESCAPES)
        if escaped != text:
            node.replace_with(escaped)
    for ruby in list(soup.find_all("ruby")):
        if ruby.find_parent("ruby") is not None:
            continue
        ruby.replace_with(encode_segments(ruby_segments(ruby)))
    return Furigana(_collapse_ws(soup.get_text(separator="")))
