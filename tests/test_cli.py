from __future__ import annotations

import io
import json

import pytest

import furi.cli as cli
import furi.logging_utils as logging_utils


def test_kanji_and_kana_commands(capsys) -> None:
    assert cli.main(["kanji", "[日本|に|ほん]が[好|す]きです"]) == 0
    assert cli.main(["kana", "[日本|に|ほん]が[好|す]きです", "ありがとう"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["日本が好きです", "にほんがすきです", "ありがとう"]


def test_malformed_input_exits_with_message() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["kana", "[漢字|かん"])

    assert "unterminated bracket group" in str(excinfo.value)


def test_segments_json_output(capsys) -> None:
    assert cli.main(["segments", "--json", "[日本|に|ほん]が"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "raw": "[日本|に|ほん]が",
        "segments": [
            {"type": "kanji", "text": "日本", "readings": ["に", "ほん"]},
            {"type": "kana", "text": "が"},
        ],
    }


def test_segments_json_output_for_several_inputs(capsys) -> None:
    assert cli.main(["segments", "--json", "[好|す]き", "です"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [entry["raw"] for entry in payload] == ["[好|す]き", "です"]


def test_segments_table_output(capsys) -> None:
    assert cli.main(["segments", "[好|す]き"]) == 0

    output = capsys.readouterr().out
    assert "kanji" in output
    assert "kana" in output


def test_check_reports_each_input(capsys) -> None:
    exit_code = cli.main(["check", "[漢字|かんじ]", "[漢字|か|ん|じ]"])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "OK: [漢字|かんじ]" in output
    assert "ERROR: [漢字|か|ん|じ]" in output
    assert cli.main(["check", "ありがとう"]) == 0


def test_ruby_command_reads_file(tmp_path, capsys) -> None:
    html_path = tmp_path / "page.html"
    html_path.write_text("<p><ruby>漢字<rt>かんじ</rt></ruby>です</p>", encoding="utf-8")

    assert cli.main(["ruby", str(html_path)]) == 0
    assert capsys.readouterr().out.strip() == "[漢字|かんじ]です"


def test_ruby_command_reads_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli.sys, "stdin", io.StringIO("<ruby>好<rt>す</rt></ruby>き"))

    assert cli.main(["ruby", "-"]) == 0
    assert capsys.readouterr().out.strip() == "[好|す]き"


def test_ruby_command_missing_file(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["ruby", str(tmp_path / "missing.html")])

    assert "Input file not found" in str(excinfo.value)


def test_debug_flag_logs_parse_errors(monkeypatch, capsys) -> None:
    monkeypatch.setattr(logging_utils, "_DEBUG_LOG", False)

    assert cli.main(["check", "--debug", "[漢字"]) == 1
    captured = capsys.readouterr()
    assert "[furi debug] invalid furigana" in captured.err
    assert "ERROR: [漢字" in captured.out


def test_no_arguments_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "usage: furi" in capsys.readouterr().out


def test_format_command(capsys) -> None:
    assert cli.main(["format", "[大|だい][丈|じょう][夫|ぶ]", "[音楽大|おんがく|だい]"]) == 0
    assert cli.main(["format", "--lossy", "[大|だい][丈夫|じょうぶ]"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["[大丈夫|だい|じょう|ぶ]", "[音楽大|おんがくだい]", "[大丈夫|だいじょうぶ]"]


def test_format_command_rejects_unterminated_input() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["format", "[漢字|かん"])

    assert "unterminated bracket group" in str(excinfo.value)
