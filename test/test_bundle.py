from __future__ import annotations

import os
from pathlib import Path
import plistlib

from themecsv.bundle import bundle_info
from themecsv.bundle import install_theme
from themecsv.bundle import preview_path
from themecsv.bundle import write_preview
from themecsv.document import build_theme

SOURCE = (
    "Header, Jane, MyTheme, source.theme, THEME-UUID\n"
    "Main, #000000, #FFFFFF, #FF0000, #333333, #555555, #222222\n"
    "Scope, Strings, nil, #00FF00, italic, string.quoted\n"
)


def _bundle_identifier() -> str:
    return "BUNDLE-UUID"


def test_preview_path_swaps_source_suffix(tmp_path: Path) -> None:
    assert preview_path(tmp_path / "Demo.tmcsv") == tmp_path / "Demo.plist"
    assert preview_path(tmp_path / "Demo") == tmp_path / "Demo.plist"


def test_write_preview_writes_sibling_plist(tmp_path: Path) -> None:
    source = tmp_path / "Demo.tmcsv"
    source.write_text(SOURCE, encoding="utf-8")
    document = build_theme(SOURCE)

    target = write_preview(document, source)

    assert target == tmp_path / "Demo.plist"
    assert plistlib.loads(target.read_bytes()) == document.to_plist()


def test_bundle_info_describes_theme() -> None:
    document = build_theme(SOURCE)

    info = bundle_info(document, identifier_factory=_bundle_identifier)

    assert info == {
        "contactName": "Jane",
        "description": "A brilliant theme by Jane called MyTheme.",
        "name": "MyTheme Bundle",
        "uuid": "BUNDLE-UUID",
    }


def test_install_theme_creates_bundle_layout(tmp_path: Path) -> None:
    bundles_dir = tmp_path / "Bundles"
    document = build_theme(SOURCE)

    installed = install_theme(
        document,
        bundles_dir,
        identifier_factory=_bundle_identifier,
    )

    bundle_path = bundles_dir / "MyTheme.tmbundle"
    assert installed.created
    assert installed.bundle_path == bundle_path
    assert installed.theme_path == (
        bundle_path / "Themes" / "MyTheme.tmTheme"
    )
    info = plistlib.loads((bundle_path / "info.plist").read_bytes())
    assert info["uuid"] == "BUNDLE-UUID"
    assert info["contactName"] == "Jane"
    theme = plistlib.loads(installed.theme_path.read_bytes())
    assert theme == document.to_plist()


def test_install_theme_updates_existing_bundle(tmp_path: Path) -> None:
    bundles_dir = tmp_path / "Bundles"
    first = build_theme(SOURCE)
    install_theme(first, bundles_dir, identifier_factory=_bundle_identifier)
    bundle_path = bundles_dir / "MyTheme.tmbundle"
    info_path = bundle_path / "info.plist"
    info_path.write_bytes(plistlib.dumps({"name": "Custom"}))
    os.utime(bundle_path, (0, 0))

    second = build_theme(SOURCE.replace("#00FF00", "#0000FF"))
    installed = install_theme(
        second,
        bundles_dir,
        identifier_factory=lambda: "UNUSED",
    )

    assert not installed.created
    assert plistlib.loads(info_path.read_bytes()) == {"name": "Custom"}
    theme = plistlib.loads(installed.theme_path.read_bytes())
    assert theme["settings"][1]["settings"]["foreground"] == "#0000FF"
    assert bundle_path.stat().st_mtime > 0


def test_install_theme_completes_bundle_missing_descriptor(
    tmp_path: Path,
) -> None:
    bundles_dir = tmp_path / "Bundles"
    bundle_path = bundles_dir / "MyTheme.tmbundle"
    bundle_path.mkdir(parents=True)
    document = build_theme(SOURCE)

    installed = install_theme(
        document,
        bundles_dir,
        identifier_factory=_bundle_identifier,
    )

    assert installed.created
    info = plistlib.loads((bundle_path / "info.plist").read_bytes())
    assert info["uuid"] == "BUNDLE-UUID"
    assert installed.theme_path.exists()
