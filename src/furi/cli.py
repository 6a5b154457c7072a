from __future__ import annotations

import argparse
import json
import sys
from importlib import metadata
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

import tomllib

from .format import apply_all
from .furigana import Furigana
from .logging_utils import set_debug_logging
from .parse import FuriganaParseError
from .ruby import furigana_from_ruby_html
from .segments import Kanji, serialize_segments

COMMANDS = ("kanji", "kana", "segments", "check", "format", "ruby")


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("furi")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"furi {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print parser debug messages to stderr (same as FURI_DEBUG=1).",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="furi",
        description="Inspect furigana notation such as [日本|に|ほん]が[好|す]きです.",
    )
    _add_common_flags(ap)
    ap.add_argument("command", choices=COMMANDS, help="What to do with the input.")
    return ap


def build_text_parser(command: str, description: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=f"furi {command}", description=description)
    _add_common_flags(ap)
    ap.add_argument("text", nargs="+", help="Furigana strings; several arguments are handled one by one.")
    return ap


def build_segments_parser() -> argparse.ArgumentParser:
    ap = build_text_parser("segments", "Show the segments of furigana strings.")
    ap.add_argument(
        "--json",
        action="store_true",
        help="Emit the segments as JSON instead of a table.",
    )
    return ap


def build_format_parser() -> argparse.ArgumentParser:
    ap = build_text_parser("format", "Merge adjacent kanji parts and fix unaligned kanji blocks.")
    ap.add_argument(
        "--lossy",
        action="store_true",
        help="Also merge groups without per-character readings (their readings are joined).",
    )
    return ap


def build_ruby_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="furi ruby",
        description="Convert HTML <ruby> markup to furigana notation.",
    )
    _add_common_flags(ap)
    ap.add_argument("input_path", help="HTML file to read, or '-' for stdin.")
    return ap


def _parse_or_exit(text: str) -> Furigana:
    try:
        return Furigana.parse(text)
    except FuriganaParseError as exc:
        raise SystemExit(str(exc)) from exc


def _run_kanji(args: argparse.Namespace) -> int:
    for text in args.text:
        print(_parse_or_exit(text).kanji_str())
    return 0


def _run_kana(args: argparse.Namespace) -> int:
    for text in args.text:
        print(_parse_or_exit(text).kana_str())
    return 0


def _run_segments(args: argparse.Namespace) -> int:
    parsed = [_parse_or_exit(text) for text in args.text]
    if args.json:
        payload = [
            {"raw": furi.raw, "segments": serialize_segments(furi.segments())} for furi in parsed
        ]
        print(json.dumps(payload if len(payload) > 1 else payload[0], ensure_ascii=False, indent=2))
        return 0
    console = Console()
    for furi in parsed:
        table = Table(title=escape(furi.raw))
        table.add_column("#", justify="right")
        table.add_column("Type")
        table.add_column("Text")
        table.add_column("Readings")
        for index, segment in enumerate(furi.segments(), start=1):
            if isinstance(segment, Kanji):
                table.add_row(
                    str(index), "kanji", escape(segment.kanji), escape(" / ".join(segment.readings))
                )
            else:
                table.add_row(str(index), "kana", escape(segment.text), "")
        console.print(table)
    return 0


def _run_check(args: argparse.Namespace) -> int:
    failures = 0
    for text in args.text:
        error = Furigana(text).error()
        if error is None:
            print(f"OK: {text}")
        else:
            failures += 1
            print(f"ERROR: {text}: {error}")
    return 1 if failures else 0


def _run_format(args: argparse.Namespace) -> int:
    for text in args.text:
        try:
            print(apply_all(Furigana(text), lossy=args.lossy).raw)
        except FuriganaParseError as exc:
            raise SystemExit(str(exc)) from exc
    return 0


def _run_ruby(args: argparse.Namespace) -> int:
    if args.input_path == "-":
        html = sys.stdin.read()
    else:
        path = Path(args.input_path).expanduser()
        if not path.exists():
            raise SystemExit(f"Input file not found: {path}")
        html = path.read_text(encoding="utf-8")
    print(furigana_from_ruby_html(html).raw)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] in COMMANDS:
        command = argv[0]
        if command == "segments":
            parser = build_segments_parser()
        elif command == "ruby":
            parser = build_ruby_parser()
        elif command == "format":
            parser = build_format_parser()
        elif command == "kanji":
            parser = build_text_parser("kanji", "Print the surface text of furigana strings.")
        elif command == "kana":
            parser = build_text_parser("kana", "Print the kana reading of furigana strings.")
        else:
            parser = build_text_parser("check", "Validate furigana strings.")
        args = parser.parse_args(argv[1:])
        if args.debug:
            set_debug_logging(True)
        runner = {
            "kanji": _run_kanji,
            "kana": _run_kana,
            "segments": _run_segments,
            "check": _run_check,
            "format": _run_format,
            "ruby": _run_ruby,
        }[command]
        return runner(args)

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    parser.parse_args(argv)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
