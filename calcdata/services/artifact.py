from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..models.extraction import ExtractionResult, PricingMaps

"""Artifact serialization.

Document layout (key names are the contract with the calculator frontend and
backend, do not rename):

    {
      "settings": {...},
      "pricing": {
        "pvPowerPriceD": {...},
        "pvPowerPriceE": {...},
        "inverterMap": {...},
        "batteryMap": {...},
        "headers": [...]
      }
    }

Each destination is written through a temporary file in the same directory
and moved into place, so a consumer never sees a half-written document. All
temporary files are written before the first one is moved.
"""

__all__ = [
    "ArtifactError",
    "to_document",
    "from_document",
    "write_artifact",
    "read_artifact",
    "read_existing_settings",
]

logger = logging.getLogger(__name__)

_PRICING_KEYS = {
    "pvPowerPriceD": "pv_power_price_d",
    "pvPowerPriceE": "pv_power_price_e",
    "inverterMap": "inverter_map",
    "batteryMap": "battery_map",
}


class ArtifactError(Exception):
    """Raised when an artifact cannot be written or parsed."""


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


def to_document(result: ExtractionResult) -> dict[str, Any]:
    pricing: dict[str, Any] = {
        doc_key: dict(getattr(result.pricing, attr)) for doc_key, attr in _PRICING_KEYS.items()
    }
    pricing["headers"] = list(result.headers)
    return {"settings": dict(result.settings), "pricing": pricing}


def from_document(doc: dict[str, Any]) -> ExtractionResult:
    if not isinstance(doc, dict):
        raise ArtifactError(f"artifact root must be an object, got {type(doc).__name__}")
    pricing_raw = doc.get("pricing") or {}
    maps = PricingMaps(
        **{attr: dict(pricing_raw.get(doc_key) or {}) for doc_key, attr in _PRICING_KEYS.items()}
    )
    return ExtractionResult(
        settings=dict(doc.get("settings") or {}),
        pricing=maps,
        headers=list(pricing_raw.get("headers") or []),
    )


def _dumps(result: ExtractionResult) -> str:
    try:
        return json.dumps(to_document(result), ensure_ascii=False, indent=2, default=_json_default)
    except (TypeError, ValueError) as e:
        raise ArtifactError(f"artifact not serializable: {e}") from e


def _stage(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    return Path(tmp)


def write_artifact(result: ExtractionResult, paths: Iterable[Path | str]) -> list[Path]:
    """Serialize `result` once and write it to every destination.

    Every temp file is staged before any destination is replaced, so a
    destination that cannot be prepared leaves all outputs untouched.
    Raises ArtifactError if serialization or any write fails.
    """
    text = _dumps(result)
    targets = [Path(p) for p in paths]
    staged: list[tuple[Path, Path]] = []
    try:
        for path in targets:
            try:
                staged.append((_stage(path, text), path))
            except OSError as e:
                raise ArtifactError(f"cannot write {path}: {e}") from e
        while staged:
            tmp, path = staged[0]
            try:
                os.replace(tmp, path)
            except OSError as e:
                raise ArtifactError(f"cannot write {path}: {e}") from e
            staged.pop(0)
            logger.info(f"Wrote {path}")
    finally:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
    return targets


def read_artifact(path: Path | str) -> ExtractionResult:
    path = Path(path)
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ArtifactError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ArtifactError(f"invalid artifact {path}: {e}") from e
    return from_document(doc)


def read_existing_settings(path: Path | str | None) -> dict[str, Any]:
    """Settings block of a previously written artifact, or {} when unavailable.

    Curated entries that only live in the artifact (not in the sheet) survive
    regeneration this way. A missing or broken file is not fatal.
    """
    if path is None:
        return {}
    path = Path(path)
    if not path.exists():
        logger.debug(f"no previous artifact at {path}")
        return {}
    try:
        return dict(read_artifact(path).settings)
    except ArtifactError as e:
        logger.warning(f"ignoring previous settings: {e}")
        return {}
