"""Assemble theme rows into a TextMate theme document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .identifiers import new_identifier
from .rows import GutterRow, MainRow, ScopeRow, ThemeSections
from .rows import scan_theme_source


@dataclass(frozen=True)
class ScopeRule:
    """One entry of the theme ``settings`` array.

    The default rule built from the ``Main`` row has neither ``name`` nor
    ``scope``; the editor treats the first entry as the global style.
    """

    settings: dict[str, str] = field(hash=False)
    name: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_main(cls, main: MainRow) -> "ScopeRule":
        """Build the default rule from the global colors."""

        return cls(settings=main.to_plist())

    @classmethod
    def from_scope(cls, row: ScopeRow) -> "ScopeRule":
        """Build a named rule from a ``Scope`` row."""

        return cls(
            settings=row.style.to_plist(),
            name=row.name,
            scope=row.scope,
        )

    @property
    def is_default(self) -> bool:
        """Return ``True`` for the unnamed global rule."""

        return self.name is None and self.scope is None

    def to_plist(self) -> dict[str, Any]:
        """Return the property-list mapping for this rule."""

        payload: dict[str, Any] = {}
        if self.name is not None:
            payload["name"] = self.name
        if self.scope is not None:
            payload["scope"] = self.scope
        payload["settings"] = dict(self.settings)
        return payload


@dataclass(frozen=True)
class ThemeDocument:
    """In-memory form of a ``.tmTheme`` property list."""

    author: str
    name: str
    semantic_class: str
    uuid: str
    scope_rules: tuple[ScopeRule, ...]
    gutter: Optional[GutterRow] = None

    @property
    def default_rule(self) -> ScopeRule:
        """Return the global rule stored at position 0."""

        return self.scope_rules[0]

    def to_plist(self) -> dict[str, Any]:
        """Return the mapping handed to the property-list encoder."""

        payload: dict[str, Any] = {
            "author": self.author,
            "name": self.name,
            "semanticClass": self.semantic_class,
            "settings": [rule.to_plist() for rule in self.scope_rules],
            "uuid": self.uuid,
        }
        if self.gutter is not None:
            payload["gutterSettings"] = self.gutter.to_plist()
        return payload


def assemble_document(sections: ThemeSections) -> ThemeDocument:
    """Fold scanned sections into a theme document."""

    header = sections.header
    main = sections.main
    if header is None or main is None:
        raise ValueError("sections must include a header and a main row")

    rules = [ScopeRule.from_main(main)]
    rules.extend(ScopeRule.from_scope(row) for row in sections.scopes)
    return ThemeDocument(
        author=header.author,
        name=header.name,
        semantic_class=header.semantic_class,
        uuid=header.uuid,
        scope_rules=tuple(rules),
        gutter=sections.gutter,
    )


def build_theme(
    text: str,
    *,
    identifier_factory: Callable[[], str] = new_identifier,
) -> ThemeDocument:
    """Parse ``.tmcsv`` source text into a theme document."""

    sections = scan_theme_source(text, identifier_factory=identifier_factory)
    return assemble_document(sections)
