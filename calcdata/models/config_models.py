from __future__ import annotations

from dataclasses import dataclass, field

from .extraction import Role

"""Config dataclasses for the calculator pricing extractor.

These are the typed, immutable form of config/extract.yml. The YAML parsing and
schema validation live in calcdata.config.loader; this module only describes
the shape the rest of the pipeline consumes.
"""

__all__ = [
    "ExtractConfig",
    "RoleSpec",
]


@dataclass(frozen=True)
class RoleSpec:
    """Resolution rule for one column role.

    Header synonyms are tried first (case-insensitive exact match), then the
    positional fallback column.
    """
    synonyms: tuple[str, ...]
    fallback_index: int | None = None  # 0-based, None = no positional fallback


@dataclass(frozen=True)
class ExtractConfig:
    """Root configuration object for one extraction run."""
    source_candidates: tuple[str, ...]  # ordered workbook filenames, first existing wins
    settings_sheet: str  # two-column key/value sheet
    pricing_sheet: str  # wide sheet, header row + one tier/product per row
    outputs: tuple[str, ...]  # artifact destinations
    source_directory: str = "."
    header_scan_rows: int = 50  # 0 = header is always row 0
    roles: dict[Role, RoleSpec] = field(default_factory=dict)
    existing_settings: str | None = None  # previous artifact to seed settings from

    @property
    def synonyms_by_role(self) -> dict[Role, tuple[str, ...]]:
        return {role: spec.synonyms for role, spec in self.roles.items()}

    @property
    def fallback_index_by_role(self) -> dict[Role, int | None]:
        return {role: spec.fallback_index for role, spec in self.roles.items()}
