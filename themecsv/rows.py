"""Classify ``.tmcsv`` rows into typed theme fragments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Union

from .identifiers import new_identifier

COMMENT_MARKER = "/"
FIELD_SEPARATOR = ","
UNSET_SENTINEL = "nil"
BYTE_ORDER_MARK = "\ufeff"

ROW_HEADER = "Header"
ROW_MAIN = "Main"
ROW_GUTTER = "Gutter"
ROW_SCOPE = "Scope"

_UNSAFE_NAME_CHARS = ("/", "\\")


class ThemeSourceError(ValueError):
    """Raised when theme source text cannot be turned into a theme."""


class MalformedRow(ThemeSourceError):
    """Raised when a known row kind has the wrong shape."""

    def __init__(self, kind: str, line_number: int, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.line_number = line_number


class MissingSection(ThemeSourceError):
    """Raised when a required row kind never appears in the source."""

    def __init__(self, section: str) -> None:
        super().__init__(
            f"Theme source has no {section} row; "
            f"a {section} row is required."
        )
        self.section = section


@dataclass(frozen=True)
class InputRecord:
    """Raw fields of one non-comment source line."""

    line_number: int
    fields: tuple[str, ...]

    @property
    def kind(self) -> str:
        """Return the trimmed discriminator field."""

        return self.fields[0].strip()

    def value(self, index: int) -> str:
        """Return field ``index`` with surrounding whitespace removed."""

        return self.fields[index].strip()


@dataclass(frozen=True)
class HeaderRow:
    """Theme metadata from a ``Header`` row."""

    author: str
    name: str
    semantic_class: str
    uuid: str


@dataclass(frozen=True)
class MainRow:
    """Global editor colors from the ``Main`` row."""

    background: str
    foreground: str
    caret: str
    selection: str
    invisibles: str
    line_highlight: str

    def to_plist(self) -> dict[str, str]:
        """Return the settings mapping in theme key order."""

        return {
            "background": self.background,
            "foreground": self.foreground,
            "caret": self.caret,
            "selection": self.selection,
            "invisibles": self.invisibles,
            "lineHighlight": self.line_highlight,
        }


@dataclass(frozen=True)
class GutterRow:
    """Gutter colors; ``None`` marks a field left unset."""

    background: Optional[str] = None
    foreground: Optional[str] = None
    divider: Optional[str] = None
    selection_background: Optional[str] = None
    selection_foreground: Optional[str] = None

    def to_plist(self) -> dict[str, str]:
        """Return the gutter mapping without unset keys."""

        return _drop_unset({
            "background": self.background,
            "foreground": self.foreground,
            "divider": self.divider,
            "selectionBackground": self.selection_background,
            "selectionForeground": self.selection_foreground,
        })


@dataclass(frozen=True)
class ScopeStyle:
    """Optional style overrides attached to a scope rule."""

    background: Optional[str] = None
    foreground: Optional[str] = None
    font_style: Optional[str] = None

    def to_plist(self) -> dict[str, str]:
        """Return the style mapping without unset keys."""

        return _drop_unset({
            "background": self.background,
            "foreground": self.foreground,
            "fontStyle": self.font_style,
        })


@dataclass(frozen=True)
class ScopeRow:
    """A named style override for a scope selector."""

    name: str
    scope: str
    style: ScopeStyle = field(default_factory=ScopeStyle)


ThemeRow = Union[HeaderRow, MainRow, GutterRow, ScopeRow]


@dataclass
class ThemeSections:
    """Fragments accumulated while scanning one theme source."""

    header: Optional[HeaderRow] = None
    main: Optional[MainRow] = None
    gutter: Optional[GutterRow] = None
    scopes: list[ScopeRow] = field(default_factory=list)

    def add(self, row: ThemeRow) -> None:
        """Fold ``row`` in; later Header/Main/Gutter rows replace earlier."""

        if isinstance(row, HeaderRow):
            self.header = row
        elif isinstance(row, MainRow):
            self.main = row
        elif isinstance(row, GutterRow):
            self.gutter = row
        else:
            self.scopes.append(row)


def iter_records(text: str) -> Iterator[InputRecord]:
    """Yield the non-comment lines of ``text`` split into fields."""

    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):]
    for line_number, line in enumerate(text.split("\n"), 1):
        if line.startswith(COMMENT_MARKER):
            continue
        yield InputRecord(
            line_number=line_number,
            fields=tuple(line.split(FIELD_SEPARATOR)),
        )


def classify_record(
    record: InputRecord,
    *,
    identifier_factory: Callable[[], str] = new_identifier,
) -> Optional[ThemeRow]:
    """Convert ``record`` into a theme row.

    Returns ``None`` when the discriminator is not a known row kind; such
    lines (blank ones included) are skipped without validation.
    """

    kind = record.kind
    if kind == ROW_HEADER:
        return _header_row(record, identifier_factory)
    if kind == ROW_MAIN:
        return _main_row(record)
    if kind == ROW_GUTTER:
        return _gutter_row(record)
    if kind == ROW_SCOPE:
        return _scope_row(record)
    return None


def scan_theme_source(
    text: str,
    *,
    identifier_factory: Callable[[], str] = new_identifier,
) -> ThemeSections:
    """Scan ``text`` and return its validated theme sections."""

    sections = ThemeSections()
    for record in iter_records(text):
        row = classify_record(record, identifier_factory=identifier_factory)
        if row is not None:
            sections.add(row)

    if sections.header is None:
        raise MissingSection(ROW_HEADER)
    if sections.main is None:
        raise MissingSection(ROW_MAIN)
    return sections


def is_set(value: str) -> bool:
    """Return ``True`` if a trimmed field carries a real value."""

    return bool(value) and value != UNSET_SENTINEL


def _header_row(
    record: InputRecord,
    identifier_factory: Callable[[], str],
) -> HeaderRow:
    if len(record.fields) < 4:
        raise MalformedRow(
            ROW_HEADER,
            record.line_number,
            "Header needs at least author, name, semanticClass",
        )
    name = record.value(2)
    if not _is_safe_name(name):
        raise MalformedRow(
            ROW_HEADER,
            record.line_number,
            f"Header name {name!r} must be non-empty and must not "
            "contain path separators",
        )
    uuid = record.value(4) if len(record.fields) > 4 else ""
    return HeaderRow(
        author=record.value(1),
        name=name,
        semantic_class=record.value(3),
        uuid=uuid or identifier_factory().strip(),
    )


def _main_row(record: InputRecord) -> MainRow:
    if len(record.fields) != 7:
        raise MalformedRow(
            ROW_MAIN,
            record.line_number,
            "Main must contain 6 comma-separated values: background, "
            "foreground, caret, selection, invisibles, lineHighlight",
        )
    return MainRow(
        background=record.value(1),
        foreground=record.value(2),
        caret=record.value(3),
        selection=record.value(4),
        invisibles=record.value(5),
        line_highlight=record.value(6),
    )


def _gutter_row(record: InputRecord) -> GutterRow:
    if len(record.fields) != 6:
        raise MalformedRow(
            ROW_GUTTER,
            record.line_number,
            "Gutter must contain 5 comma-separated values: background, "
            "foreground, divider, selectionBackground, selectionForeground",
        )
    return GutterRow(
        background=_optional(record, 1),
        foreground=_optional(record, 2),
        divider=_optional(record, 3),
        selection_background=_optional(record, 4),
        selection_foreground=_optional(record, 5),
    )


def _scope_row(record: InputRecord) -> ScopeRow:
    if len(record.fields) < 6:
        raise MalformedRow(
            ROW_SCOPE,
            record.line_number,
            "Scope must contain name, background, foreground, fontStyle, "
            "scopes",
        )
    # Selectors may contain commas, so everything after fontStyle is one.
    scope = FIELD_SEPARATOR.join(record.fields[5:]).strip()
    return ScopeRow(
        name=record.value(1),
        scope=scope,
        style=ScopeStyle(
            background=_optional(record, 2),
            foreground=_optional(record, 3),
            font_style=_optional(record, 4),
        ),
    )


def _optional(record: InputRecord, index: int) -> Optional[str]:
    value = record.value(index)
    return value if is_set(value) else None


def _is_safe_name(name: str) -> bool:
    if not name or name in {".", ".."}:
        return False
    return not any(char in name for char in _UNSAFE_NAME_CHARS)


def _drop_unset(values: dict[str, Optional[str]]) -> dict[str, str]:
    return {key: value for key, value in values.items() if value is not None}
