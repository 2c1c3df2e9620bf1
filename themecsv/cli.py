"""Command-line entry point for themecsv.

Turns a ``.tmcsv`` theme description into a TextMate theme. By default a
``.plist`` preview is written next to the source; ``--build`` installs the
theme into a TextMate bundle instead.
"""

from __future__ import annotations

import argparse
import textwrap
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .bundle import SOURCE_SUFFIX, install_theme, write_preview
from .config import AppConfig, ConfigError, load_config
from .document import ThemeDocument, build_theme
from .rows import MalformedRow, ThemeSourceError

console = Console(highlight=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, soft_wrap=True)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""

    parser = argparse.ArgumentParser(
        prog="gen-theme",
        description=textwrap.dedent(
            """
            Generate a TextMate theme from a .tmcsv file. Without --build a
            .plist preview is written next to the source file.
            """
        ).strip(),
    )
    parser.add_argument(
        "source",
        help=(
            f"Theme source file. The {SOURCE_SUFFIX} extension is added "
            "when omitted."
        ),
    )
    parser.add_argument(
        "-b",
        "--build",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Install the theme into its bundle (overrides config).",
    )
    parser.add_argument(
        "--bundles-dir",
        type=Path,
        default=None,
        help="Directory holding TextMate bundles (overrides config).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            "Path to a YAML configuration file. Defaults to "
            "$THEMECSV_CONFIG or ~/.config/themecsv/config.yaml."
        ),
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point used by console scripts and ``python -m themecsv.cli``."""

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.error(str(exc))

    if config.exists:
        console.print(f"Using config {escape(str(config.path))}")

    source_path = resolve_source_path(args.source)
    if not source_path.is_file():
        error_console.print(f"{escape(str(source_path))} not found")
        return 2

    try:
        text = source_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        error_console.print(
            f"Failed to read {escape(str(source_path))}: {escape(str(exc))}"
        )
        return 2

    try:
        document = build_theme(text)
    except MalformedRow as exc:
        location = f"{source_path}:{exc.line_number}"
        error_console.print(f"{escape(location)}: {escape(str(exc))}")
        return 1
    except ThemeSourceError as exc:
        error_console.print(f"{escape(str(source_path))}: {escape(str(exc))}")
        return 1

    build = config.build if args.build is None else args.build
    try:
        if build:
            _run_install(document, args.bundles_dir, config)
        else:
            _run_preview(document, source_path)
    except (OSError, ValueError) as exc:
        error_console.print(
            f"Failed to write theme {escape(document.name)}: "
            f"{escape(str(exc))}"
        )
        return 1
    return 0


def resolve_source_path(raw: str) -> Path:
    """Return ``raw`` as a path, adding the source suffix if missing."""

    if not raw.endswith(SOURCE_SUFFIX):
        raw = f"{raw}{SOURCE_SUFFIX}"
    return Path(raw).expanduser()


def _run_install(
    document: ThemeDocument,
    bundles_dir: Optional[Path],
    config: AppConfig,
) -> None:
    installed = install_theme(document, bundles_dir or config.bundles_dir)
    if installed.created:
        console.print(
            f"Created bundle {escape(installed.bundle_path.name)} "
            f"in {escape(str(installed.bundle_path.parent))}"
        )
    console.print(
        f"Updated embedded theme {escape(installed.theme_path.name)}"
    )


def _run_preview(document: ThemeDocument, source_path: Path) -> None:
    target = write_preview(document, source_path)
    console.print(f"Wrote {escape(str(target))}")


if __name__ == "__main__":
    raise SystemExit(main())
