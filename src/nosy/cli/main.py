"""Command-line entrypoint: extract or summarize an input, or fetch a whisper model."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys
from typing import Mapping

from dotenv import load_dotenv
import shtab

load_dotenv()

from nosy import __version__
from nosy.cli.download_whisper import WHISPER_MODELS, download_model, whisper_model_path_hint
from nosy.cli.progress import SpinnerProgress, download_progress
from nosy.cli.validate import collect_run_errors
from nosy.errors import NosyError, describe_error_chain
from nosy.fetchers.http_fetcher import DEFAULT_TIMEOUT_SECONDS, HttpFetcherOptions, HttpFetchMode
from nosy.pipeline.models import ExtractorKind, Mode, PipelineRequest
from nosy.pipeline.orchestrator import ContentPipeline, default_workdir
from nosy.summarize import (
    DEFAULT_LANGUAGE,
    DEFAULT_PROVIDER,
    PROVIDERS,
    LLMSettings,
    LLMSummarizer,
    MessageOptions,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "off": logging.CRITICAL + 1,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}
COMMANDS = {"extract", "ext", "summarize", "recap", "download-whisper", "completion", "comp"}
COMPLETION_COMMANDS = {"completion", "comp"}
COMPLETION_SHELLS = ("bash", "zsh", "tcsh")
TOP_LEVEL_FLAGS = {"-h", "--help", "--version"}


def _common_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("input", help="Input path or URL")
    parent.add_argument("-o", "--out", dest="output", type=Path, required=True, help="Output file path")
    parent.add_argument("-w", "--workdir", type=Path, default=None, help="Working directory for temporary files")
    parent.add_argument(
        "--ext-kind",
        choices=[kind.value for kind in ExtractorKind.selectable()],
        default=None,
        help="Force extractor kind for extraction",
    )
    parent.add_argument(
        "--http-fetch-mode",
        choices=[mode.value for mode in HttpFetchMode],
        default=HttpFetchMode.GET.value,
        help="How HTTP inputs are fetched: plain GET or a headless browser",
    )
    parent.add_argument(
        "--http-timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help="HTTP fetch timeout in seconds",
    )
    _add_output_flags(parent)
    return parent


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--log-level", choices=list(LOG_LEVELS), default="info", help="Set log level")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress display")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nosy",
        description="Fetch, extract and summarize documents, web pages and audio with an LLM",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)
    common = _common_parent()

    extract = subparsers.add_parser(
        "extract",
        aliases=["ext"],
        parents=[common],
        help="Extract fetched content to text for LLM consumption",
    )
    extract.set_defaults(mode=Mode.EXTRACT)

    summarize = subparsers.add_parser(
        "summarize",
        aliases=["recap"],
        parents=[common],
        help="Summarize content using an LLM (default command)",
    )
    summarize.set_defaults(mode=Mode.SUMMARIZE)
    summarize.add_argument(
        "--provider",
        choices=sorted(PROVIDERS),
        default=DEFAULT_PROVIDER,
        help="LLM service provider; selects the endpoint and API key variable",
    )
    summarize.add_argument("--model", default=None, help="LLM model identifier")
    summarize.add_argument("--lang", default=DEFAULT_LANGUAGE, help="Language for the summary")
    summarize.add_argument(
        "--system-template",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to the system message template file (defaults to built-in template)",
    )
    summarize.add_argument(
        "--user-template",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to the user message template file (defaults to built-in template)",
    )

    download = subparsers.add_parser("download-whisper", help="Download a whisper model to a specified path")
    download.add_argument("model", choices=WHISPER_MODELS, metavar="MODEL", help="Whisper model to download")
    download.add_argument("-o", "--out", dest="output", type=Path, required=True, help="Output file or directory")
    download.add_argument("--overwrite", action="store_true", help="Overwrite existing file")
    _add_output_flags(download)
    download.set_defaults(mode=None)

    completion = subparsers.add_parser(
        "completion",
        aliases=["comp"],
        help="Print a shell completion script to stdout",
    )
    completion.add_argument("shell", choices=COMPLETION_SHELLS, metavar="SHELL", help="Target shell")
    completion.set_defaults(mode=None, log_level="warn", no_progress=True)

    return parser


def normalize_argv(argv: list[str]) -> list[str]:
    """Route bare ``nosy INPUT ...`` invocations to the summarize command."""

    if argv and (argv[0] in COMMANDS or argv[0] in TOP_LEVEL_FLAGS):
        return argv
    return ["summarize", *argv]


def configure_logging(level_name: str) -> None:
    level = LOG_LEVELS[level_name]
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")
    if level_name == "off":
        logging.disable(logging.CRITICAL)


def _build_summarizer(args: argparse.Namespace, environ: Mapping[str, str] | None) -> LLMSummarizer:
    settings = LLMSettings.from_env(environ, provider=args.provider, model=args.model)
    options = MessageOptions(
        system_template=args.system_template,
        user_template=args.user_template,
        language=args.lang,
    )
    return LLMSummarizer(settings, messages=options)


def run_pipeline(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    environ: Mapping[str, str] | None = None,
) -> int:
    forced_kind = ExtractorKind(args.ext_kind) if args.ext_kind else None
    templates: tuple[Path | None, ...] = ()
    if args.mode is Mode.SUMMARIZE:
        templates = (args.system_template, args.user_template)

    errors = collect_run_errors(
        output=args.output,
        forced_kind=forced_kind,
        templates=templates,
        environ=environ,
    )
    if errors:
        parser.error("; ".join(errors))

    summarizer = None
    if args.mode is Mode.SUMMARIZE:
        try:
            summarizer = _build_summarizer(args, environ)
        except NosyError as exc:
            parser.error(str(exc))

    workdir = args.workdir
    if workdir is None:
        workdir = default_workdir()
        logger.info("Using system temporary directory as workdir: %s", workdir)

    request = PipelineRequest(
        input=args.input,
        output=args.output,
        mode=args.mode,
        workdir=workdir,
        forced_kind=forced_kind,
    )
    fetch_options = HttpFetcherOptions(
        mode=HttpFetchMode(args.http_fetch_mode),
        timeout_seconds=args.http_timeout,
    )

    with SpinnerProgress(enabled=not args.no_progress) as progress:
        pipeline = ContentPipeline(
            fetch_options=fetch_options,
            summarizer=summarizer,
            progress=progress,
            environ=environ,
        )
        try:
            result = asyncio.run(pipeline.run(request))
        except NosyError as exc:
            logger.error("%s", describe_error_chain(exc))
            return 1

    logger.info("Wrote %s to %s", args.mode.value, result.output_path)
    return 0


def run_completion(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    sys.stdout.write(shtab.complete(parser, shell=args.shell))
    return 0


def run_download(args: argparse.Namespace) -> int:
    with download_progress(enabled=not args.no_progress) as progress:
        try:
            path = asyncio.run(
                download_model(args.model, args.output, overwrite=args.overwrite, progress=progress)
            )
        except NosyError as exc:
            logger.error("%s", describe_error_chain(exc))
            return 1

    print(whisper_model_path_hint(path))
    return 0


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    parser = build_parser()
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(normalize_argv(raw_argv))

    configure_logging(args.log_level)
    logger.debug("Parsed arguments: %s", args)

    if args.command == "download-whisper":
        return run_download(args)
    if args.command in COMPLETION_COMMANDS:
        return run_completion(args, parser)
    return run_pipeline(args, parser, environ)


if __name__ == "__main__":
    raise SystemExit(main())
