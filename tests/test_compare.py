from __future__ import annotations

import pytest

from furi.compare import FuriComparator
from furi.furigana import Furigana
from furi.segments import Kana, Kanji


@pytest.mark.parametrize(
    ("left", "right", "lit_match"),
    [
        ("[音楽|おん|がく]", "[音|おん][楽|がく]", True),
        ("[音楽|おん|がく]", "[音|おん][楽|がく]", False),
        ("[音楽|おん|がく]", "[音楽|おんがく]", False),
        ("[日本|に|ほん]が", "[日|に][本|ほん]が", True),
    ],
)
def test_sequences_compare_equal(left: str, right: str, lit_match: bool) -> None:
    comparator = FuriComparator(lit_match)

    assert comparator.eq_seq(Furigana(left).segments(), Furigana(right).segments())


def test_literal_match_needs_same_kanji_alignment() -> None:
    comparator = FuriComparator(lit_match=True)

    assert not comparator.eq_seq(
        Furigana("[音楽|おん|がく]").segments(),
        Furigana("[音楽|おんがく]").segments(),
    )


def test_kana_runs_split_differently_still_match() -> None:
    comparator = FuriComparator(lit_match=True)

    assert comparator.eq_seq(
        [Kana("すき"), Kana("です")],
        [Kana("すきです")],
    )


def test_single_segment_comparison() -> None:
    assert FuriComparator(False).eq(Kanji.multi("音楽", ["おん", "がく"]), Kanji.single("音楽", "おんがく"))
    assert not FuriComparator(True).eq(Kanji.multi("音楽", ["おん", "がく"]), Kanji.single("音楽", "おんがく"))
    assert not FuriComparator(False).eq(Kana("が"), Kanji.single("我", "が"))
