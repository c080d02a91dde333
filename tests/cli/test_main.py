from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from nosy.cli.main import build_parser, main, normalize_argv
from nosy.pipeline.models import Mode


def test_bare_invocation_defaults_to_summarize() -> None:
    assert normalize_argv(["article.pdf", "-o", "out.md"]) == ["summarize", "article.pdf", "-o", "out.md"]
    assert normalize_argv(["ext", "article.pdf"]) == ["ext", "article.pdf"]
    assert normalize_argv(["--version"]) == ["--version"]
    assert normalize_argv([]) == ["summarize"]


def test_aliases_map_to_modes() -> None:
    parser = build_parser()

    extract = parser.parse_args(["ext", "in.html", "-o", "out.txt", "--ext-kind", "html"])
    recap = parser.parse_args(["recap", "in.html", "-o", "out.txt", "--lang", "French"])

    assert extract.mode is Mode.EXTRACT
    assert extract.ext_kind == "html"
    assert recap.mode is Mode.SUMMARIZE
    assert recap.lang == "French"
    assert recap.provider == "openrouter"


def test_ext_kind_rejects_unsupported_choice() -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["extract", "in", "-o", "out", "--ext-kind", "unsupported"])

    assert excinfo.value.code == 2


def test_extract_plain_text_end_to_end(tmp_path: Path) -> None:
    source = tmp_path / "notes.txt"
    source.write_text("line one\nline two\n", encoding="utf-8")
    output = tmp_path / "nested" / "notes.out"

    code = main(["extract", str(source), "-o", str(output), "--no-progress", "--log-level", "error"])

    assert code == 0
    assert output.read_bytes() == source.read_bytes()


def test_existing_output_is_refused(tmp_path: Path) -> None:
    source = tmp_path / "notes.txt"
    source.write_text("hello", encoding="utf-8")
    output = tmp_path / "out.txt"
    output.write_text("keep me", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["extract", str(source), "-o", str(output), "--no-progress", "--log-level", "error"])

    assert excinfo.value.code == 2
    assert output.read_text(encoding="utf-8") == "keep me"


def test_forced_pandoc_requires_binary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "notes.docx"
    source.write_bytes(b"PK")

    with patch("nosy.extractors.pandoc_extractor.shutil.which", return_value=None):
        with pytest.raises(SystemExit) as excinfo:
            main(
                [
                    "extract",
                    str(source),
                    "-o",
                    str(tmp_path / "out.txt"),
                    "--ext-kind",
                    "pandoc",
                    "--no-progress",
                ]
            )

    assert excinfo.value.code == 2
    assert "pandoc.org/installing" in capsys.readouterr().err


def test_forced_whisper_requires_model_env(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "talk.mp3"
    source.write_bytes(b"ID3")

    with pytest.raises(SystemExit) as excinfo:
        main(
            ["extract", str(source), "-o", str(tmp_path / "out.txt"), "--ext-kind", "whisper", "--no-progress"],
            environ={},
        )

    assert excinfo.value.code == 2
    assert "WHISPER_MODEL_PATH is not set" in capsys.readouterr().err


def test_summarize_requires_api_key(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "notes.txt"
    source.write_text("hello", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(source), "-o", str(tmp_path / "summary.md"), "--no-progress"], environ={})

    assert excinfo.value.code == 2
    assert "OPENROUTER_API_KEY" in capsys.readouterr().err


def test_missing_custom_template_is_refused(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "notes.txt"
    source.write_text("hello", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "summarize",
                str(source),
                "-o",
                str(tmp_path / "summary.md"),
                "--system-template",
                str(tmp_path / "missing.j2"),
                "--no-progress",
            ],
            environ={"OPENROUTER_API_KEY": "sk"},
        )

    assert excinfo.value.code == 2
    assert "missing.j2" in capsys.readouterr().err


def test_pipeline_failure_exits_one(tmp_path: Path) -> None:
    code = main(
        [
            "extract",
            "ftp://example.com/file.txt",
            "-o",
            str(tmp_path / "out.txt"),
            "--no-progress",
            "--log-level",
            "error",
        ]
    )

    assert code == 1
    assert not (tmp_path / "out.txt").exists()


@pytest.mark.parametrize("argv", [["completion", "bash"], ["comp", "zsh"], ["completion", "tcsh"]])
def test_completion_prints_script(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    code = main(argv)

    assert code == 0
    assert "nosy" in capsys.readouterr().out


def test_completion_rejects_unknown_shell() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["completion", "fish"])

    assert excinfo.value.code == 2
