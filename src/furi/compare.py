from __future__ import annotations

from itertools import chain
from typing import Iterable

from .segments import Segment, SegmentRef, kana_text, kanji_text, reading_pairs

__all__ = ["FuriComparator"]


class FuriComparator:
    """
    Compares furigana segments or segment sequences.

    With ``lit_match`` the readings must line up with the same kanji
    literals, so ``[音楽|おん|がく]`` equals ``[音|おん][楽|がく]`` but not
    ``[音楽|おんがく]``. Without it only the surface and kana strings count.
    """

    def __init__(self, lit_match: bool = False) -> None:
        self.lit_match = lit_match

    def eq(self, left: Segment | SegmentRef, right: Segment | SegmentRef) -> bool:
        if self.lit_match:
            return reading_pairs(left) == reading_pairs(right)
        return kanji_text(left) == kanji_text(right) and kana_text(left) == kana_text(right)

    def eq_seq(
        self,
        left: Iterable[Segment | SegmentRef],
        right: Iterable[Segment | SegmentRef],
    ) -> bool:
        left = list(left)
        right = list(right)
        if self.lit_match:
            left_pairs = list(chain.from_iterable(reading_pairs(seg) for seg in left))
            right_pairs = list(chain.from_iterable(reading_pairs(seg) for seg in right))
            return _merge_kana_pairs(left_pairs) == _merge_kana_pairs(right_pairs)
        same_kanji = "".join(map(kanji_text, left)) == "".join(map(kanji_text, right))
        return same_kanji and "".join(map(kana_text, left)) == "".join(map(kana_text, right))


def _merge_kana_pairs(pairs: list[tuple[str, str | None]]) -> list[tuple[str, str | None]]:
    # Adjacent kana runs compare as one run regardless of how they were split.
    merged: list[tuple[str, str | None]] = []
    for surface, reading in pairs:
        if reading is None and merged and merged[-1][1] is None:
            merged[-1] = (merged[-1][0] + surface, None)
        else:
            merged.append((surface, reading))
    return merged
