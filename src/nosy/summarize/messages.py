"""Chat message construction from jinja2 templates."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from jinja2 import StrictUndefined, Template, TemplateError

from nosy.errors import ConfigurationError
from nosy.validation import require_regular_file

SYSTEM_TEMPLATE_NAME = "system.md.j2"
USER_TEMPLATE_NAME = "user.md.j2"
DEFAULT_LANGUAGE = "English"


def builtin_template(name: str) -> str:
    return resources.files("nosy.summarize").joinpath("templates", name).read_text(encoding="utf-8")


def load_template(path: Path | None, default_name: str) -> str:
    """Read a user template, or the packaged default when ``path`` is None."""

    if path is None:
        return builtin_template(default_name)

    require_regular_file(path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"failed to read template file {str(path)!r}: {exc}") from exc


def render_template(source: str, variables: dict[str, Any]) -> str:
    try:
        return Template(source, undefined=StrictUndefined).render(**variables)
    except TemplateError as exc:
        raise ConfigurationError(f"failed to render template: {exc}") from exc


@dataclass(frozen=True, slots=True)
class MessageOptions:
    """Template overrides and variables for the summary prompt."""

    system_template: Path | None = None
    user_template: Path | None = None
    language: str = DEFAULT_LANGUAGE


def build_chat_messages(options: MessageOptions, content: str) -> list[dict[str, str]]:
    """Return the system and user chat messages for ``content``."""

    system_source = load_template(options.system_template, SYSTEM_TEMPLATE_NAME)
    user_source = load_template(options.user_template, USER_TEMPLATE_NAME)

    return [
        {"role": "system", "content": render_template(system_source, {"language": options.language})},
        {"role": "user", "content": render_template(user_source, {"content": content})},
    ]
