from __future__ import annotations

from pathlib import Path

import pytest

from nosy.errors import ConfigurationError
from nosy.summarize.messages import MessageOptions, build_chat_messages, render_template


def test_builtin_templates_render_language_and_content() -> None:
    messages = build_chat_messages(MessageOptions(language="Japanese"), "The quick brown fox.")

    assert [message["role"] for message in messages] == ["system", "user"]
    assert "Japanese" in messages[0]["content"]
    assert "The quick brown fox." in messages[1]["content"]


def test_custom_templates_override_builtins(tmp_path: Path) -> None:
    system = tmp_path / "system.j2"
    system.write_text("Answer in {{ language }} only.", encoding="utf-8")
    user = tmp_path / "user.j2"
    user.write_text("TL;DR please:\n{{ content }}", encoding="utf-8")

    messages = build_chat_messages(
        MessageOptions(system_template=system, user_template=user, language="German"),
        "Body",
    )

    assert messages[0]["content"] == "Answer in German only."
    assert messages[1]["content"] == "TL;DR please:\nBody"


def test_missing_template_file_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="does not exist"):
        build_chat_messages(MessageOptions(system_template=tmp_path / "nope.j2"), "Body")


def test_undefined_variables_fail_rendering() -> None:
    with pytest.raises(ConfigurationError, match="render"):
        render_template("Hello {{ name }}", {})
