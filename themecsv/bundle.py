"""Write generated themes as preview files or into TextMate bundles."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Callable

from .document import ThemeDocument
from .identifiers import new_identifier
from .plist_codec import encode

SOURCE_SUFFIX = ".tmcsv"
PREVIEW_SUFFIX = ".plist"
BUNDLE_SUFFIX = ".tmbundle"
THEME_SUFFIX = ".tmTheme"
BUNDLE_INFO_NAME = "info.plist"
THEMES_DIR_NAME = "Themes"


@dataclass(frozen=True)
class InstalledTheme:
    """Where a theme was installed and whether its bundle is new."""

    bundle_path: Path
    theme_path: Path
    created: bool


def preview_path(source_path: Path) -> Path:
    """Return the sibling ``.plist`` path used in preview mode."""

    if source_path.suffix == SOURCE_SUFFIX:
        return source_path.with_suffix(PREVIEW_SUFFIX)
    return source_path.with_name(source_path.name + PREVIEW_SUFFIX)


def write_preview(document: ThemeDocument, source_path: Path) -> Path:
    """Write ``document`` next to ``source_path`` and return the target."""

    payload = encode(document)
    target = preview_path(source_path)
    target.write_bytes(payload)
    return target


def bundle_path_for(document: ThemeDocument, bundles_dir: Path) -> Path:
    """Return the bundle directory that holds ``document``."""

    return bundles_dir.expanduser() / f"{document.name}{BUNDLE_SUFFIX}"


def bundle_info(
    document: ThemeDocument,
    *,
    identifier_factory: Callable[[], str] = new_identifier,
) -> dict[str, str]:
    """Return the ``info.plist`` descriptor for a new theme bundle."""

    return {
        "contactName": document.author,
        "description": (
            f"A brilliant theme by {document.author} "
            f"called {document.name}."
        ),
        "name": f"{document.name} Bundle",
        "uuid": identifier_factory(),
    }


def install_theme(
    document: ThemeDocument,
    bundles_dir: Path,
    *,
    identifier_factory: Callable[[], str] = new_identifier,
) -> InstalledTheme:
    """Install ``document`` into its bundle under ``bundles_dir``.

    A bundle without a descriptor gets a fresh ``info.plist``, so a
    half-created bundle is completed on the next run. The theme file is
    rewritten on every call and the bundle directory is touched so the
    editor notices the change.
    """

    theme_payload = encode(document)
    bundle_path = bundle_path_for(document, bundles_dir)
    info_path = bundle_path / BUNDLE_INFO_NAME
    created = not info_path.is_file()
    bundle_path.mkdir(parents=True, exist_ok=True)
    if created:
        info = bundle_info(document, identifier_factory=identifier_factory)
        info_path.write_bytes(encode(info))

    themes_dir = bundle_path / THEMES_DIR_NAME
    themes_dir.mkdir(exist_ok=True)
    theme_path = themes_dir / f"{document.name}{THEME_SUFFIX}"
    theme_path.write_bytes(theme_payload)
    os.utime(bundle_path)
    return InstalledTheme(
        bundle_path=bundle_path,
        theme_path=theme_path,
        created=created,
    )
