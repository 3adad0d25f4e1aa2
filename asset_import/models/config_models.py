from __future__ import annotations

from dataclasses import dataclass, field

from .entity import CommitMode, EntityKind

"""Config dataclasses for the asset import tool.

These are the typed view of ``config/import.yml`` produced by
``asset_import.config.loader.load_config``.
"""

__all__ = [
    "DatabaseConfig",
    "TemplateConfig",
    "LookupSource",
    "LookupConfig",
    "ImportConfig",
    "DEFAULT_TEMPLATES",
]


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TemplateConfig:
    """Layout and commit policy of one entity's import spreadsheet."""
    header_rows: int  # データ行より上の行数 (1: ヘッダのみ, 2: タイトル + ヘッダ)
    commit_mode: CommitMode
    sheet: str | None = None  # None なら先頭シート

    @property
    def row_offset(self) -> int:
        """Added to the zero-based data index to get the spreadsheet row number."""
        return self.header_rows + 1


@dataclass(frozen=True)
class LookupSource:
    table: str
    column: str
    normalize: str | None = None  # "phone": 数字のみに正規化して比較


@dataclass(frozen=True)
class LookupConfig:
    """Where to read the persisted keys (``existing``) and reference codes of an entity."""
    existing: dict[str, LookupSource] = field(default_factory=dict)
    references: dict[str, LookupSource] = field(default_factory=dict)


DEFAULT_TEMPLATES: dict[EntityKind, TemplateConfig] = {
    EntityKind.ADDRESS: TemplateConfig(header_rows=2, commit_mode=CommitMode.ALL_OR_NOTHING),
    EntityKind.EMPLOYEE: TemplateConfig(header_rows=2, commit_mode=CommitMode.SKIP_INVALID),
    EntityKind.PHONE: TemplateConfig(header_rows=1, commit_mode=CommitMode.ALL_OR_NOTHING),
    EntityKind.ROUTER: TemplateConfig(header_rows=1, commit_mode=CommitMode.SKIP_INVALID),
    EntityKind.TABLET: TemplateConfig(header_rows=1, commit_mode=CommitMode.SKIP_INVALID),
}


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the import process."""
    templates: dict[EntityKind, TemplateConfig]
    lookups: dict[EntityKind, LookupConfig]
    database: DatabaseConfig

    def template(self, entity: EntityKind) -> TemplateConfig:
        return self.templates.get(entity, DEFAULT_TEMPLATES[entity])

    def lookup(self, entity: EntityKind) -> LookupConfig:
        return self.lookups.get(entity, LookupConfig())
