"""Domain models for the calculator pricing extractor.

Configuration, workbook and extraction result types shared by the reader, the
extraction services and the CLI.
"""

from .config_models import ExtractConfig, RoleSpec
from .extraction import (
    CellValue,
    ColumnRoleAssignment,
    ExtractionResult,
    Grid,
    PricingMaps,
    ResolvedColumn,
    Role,
)
from .workbook import Sheet, Workbook

__all__ = [
    # Configuration models
    "ExtractConfig",
    "RoleSpec",
    # Workbook models
    "Sheet",
    "Workbook",
    # Extraction models
    "CellValue",
    "Grid",
    "Role",
    "ResolvedColumn",
    "ColumnRoleAssignment",
    "PricingMaps",
    "ExtractionResult",
]
