from __future__ import annotations

from .furigana import Furigana
from .parse import BLOCK_CLOSE, BLOCK_OPEN, SEPARATOR, BracketToken, scan

__all__ = ["merge_kanji_parts", "fix_kanji_blocks", "apply_all"]


def _is_detailed(token: BracketToken) -> bool:
    return len(token.readings) == token.kanji.end - token.kanji.start


def _block(kanji: str, readings: list[str]) -> str:
    return BLOCK_OPEN + SEPARATOR.join([kanji, *readings]) + BLOCK_CLOSE


def merge_kanji_parts(furi: Furigana, lossy: bool = False) -> Furigana:
    """
    Merge runs of adjacent kanji groups into one group.

    ``[大|だい][丈|じょう][夫|ぶ]`` becomes ``[大丈夫|だい|じょう|ぶ]``. Only
    groups with one reading per character take part unless ``lossy`` is set;
    then undetailed groups join too and the merged group gets a single
    concatenated reading.
    """
    raw = furi.raw
    out: list[str] = []
    run_kanji: list[str] = []
    run_readings: list[str] = []
    run_undetailed = False

    def flush() -> None:
        nonlocal run_undetailed
        if not run_kanji:
            return
        readings = ["".join(run_readings)] if run_undetailed else run_readings
        out.append(_block("".join(run_kanji), readings))
        run_kanji.clear()
        run_readings.clear()
        run_undetailed = False

    for token in scan(raw):
        if not isinstance(token, BracketToken):
            flush()
            out.append(token.span.slice(raw))
            continue
        detailed = _is_detailed(token)
        if not detailed and not lossy:
            flush()
            out.append(raw[token.start : token.end])
            continue
        if not detailed:
            run_undetailed = True
        run_kanji.append(token.kanji.slice(raw))
        run_readings.extend(span.slice(raw) for span in token.readings)
    flush()
    return Furigana("".join(out))


def fix_kanji_blocks(furi: Furigana) -> Furigana:
    """Join the readings of groups whose reading count does not match the kanji.

    ``[音楽大|おんがく|だい]`` becomes ``[音楽大|おんがくだい]``.
    """
    raw = furi.raw
    out: list[str] = []
    for token in scan(raw):
        if not isinstance(token, BracketToken):
            out.append(token.span.slice(raw))
        elif _is_detailed(token) or len(token.readings) == 1:
            out.append(raw[token.start : token.end])
        else:
            reading = "".join(span.slice(raw) for span in token.readings)
            out.append(_block(token.kanji.slice(raw), [reading]))
    return Furigana("".join(out))


def apply_all(furi: Furigana, lossy: bool = False) -> Furigana:
    return fix_kanji_blocks(merge_kanji_parts(furi, lossy=lossy))
