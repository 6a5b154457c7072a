from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .furigana import Furigana

__all__ = ["Reading"]


@dataclass(frozen=True)
class Reading:
    """
    A Japanese reading: always a kana form, sometimes an equivalent kanji form.

    ``kanji`` is None for words written in kana only.
    """

    kana: str
    kanji: str | None = None

    def has_kanji(self) -> bool:
        return self.kanji is not None

    def kanji_or_kana(self) -> str:
        return self.kanji if self.kanji is not None else self.kana

    def encode(self) -> "Furigana":
        from .furigana import Furigana
        from .segments import Kana, Kanji

        if self.kanji is None:
            return Furigana.from_segments([Kana(self.kana)] if self.kana else [])
        return Furigana.from_segments([Kanji.single(self.kanji, self.kana)])
