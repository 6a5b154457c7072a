from .compare import FuriComparator
from .format import apply_all, fix_kanji_blocks, merge_kanji_parts
from .furigana import Furigana
from .parse import (
    AlignmentMismatchError,
    EmptyKanjiSpanError,
    EmptyReadingError,
    FuriganaParseError,
    UnterminatedBracketError,
)
from .reading import Reading
from .ruby import furigana_from_ruby_html
from .segments import (
    Kana,
    KanaRef,
    Kanji,
    KanjiRef,
    Segment,
    SegmentRef,
    deserialize_segments,
    encode_segments,
    flatten_segment,
    serialize_segments,
)

__all__ = [
    "Furigana",
    "Reading",
    "FuriComparator",
    "Kana",
    "Kanji",
    "KanaRef",
    "KanjiRef",
    "Segment",
    "SegmentRef",
    "encode_segments",
    "flatten_segment",
    "serialize_segments",
    "deserialize_segments",
    "furigana_from_ruby_html",
    "merge_kanji_parts",
    "fix_kanji_blocks",
    "apply_all",
    "FuriganaParseError",
    "UnterminatedBracketError",
    "EmptyKanjiSpanError",
    "EmptyReadingError",
    "AlignmentMismatchError",
]
