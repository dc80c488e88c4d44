from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

from ..scoring.cache import make_key
from .models import MetricRecord

logger = logging.getLogger(__name__)

_catalog: dict[str, MetricRecord] = {}
_fingerprints: dict[str, str] = {}


def _cell_value(value: Any) -> Any:
    """Convert a DataFrame cell into a plain Python value, or None for no data."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not np.isfinite(value):
        return None
    if value is None or value is pd.NaT:
        return None
    if not isinstance(value, (list, dict)) and pd.isna(value):
        return None
    return value


def _assign(target: dict[str, Any], dotted: str, value: Any) -> None:
    parts = dotted.split(".")
    node = target
    for part in parts[:-1]:
        node = node.setdefault(part, {})
    node[parts[-1]] = value


def records_from_frame(df: pd.DataFrame) -> list[MetricRecord]:
    """Build metric records from a flat table with dotted column names.

    ``climate.comfort_days`` populates ``record.climate.comfort_days``;
    ``cultural.sports_teams.nba`` populates one league count. Empty cells
    are left out so the record keeps "no data" instead of zero.
    """
    if "location_id" not in df.columns:
        raise ValueError("metric table is missing the 'location_id' column")

    records: list[MetricRecord] = []
    for row in df.to_dict(orient="records"):
        payload: dict[str, Any] = {}
        for column, raw in row.items():
            value = _cell_value(raw)
            if value is None:
                continue
            _assign(payload, str(column), value)
        payload["location_id"] = str(payload.get("location_id", ""))
        records.append(MetricRecord.model_validate(payload))

    logger.debug("Built %d metric records from %d columns", len(records), len(df.columns))
    return records


def load_catalog(records: list[MetricRecord]) -> None:
    """Replace the in-memory catalog, keyed by location id."""
    _catalog.clear()
    _fingerprints.clear()
    for record in records:
        if record.location_id in _catalog:
            logger.warning("Duplicate location id %s, keeping the last record", record.location_id)
        _catalog[record.location_id] = record
        _fingerprints[record.location_id] = make_key(record)


def get_catalog() -> list[MetricRecord]:
    """Return catalog records in a stable (location id) order."""
    return [_catalog[key] for key in sorted(_catalog)]


def get_record(location_id: str) -> MetricRecord | None:
    return _catalog.get(location_id)


def record_fingerprint(record: MetricRecord) -> str:
    """Digest of a record's data, reusing the one taken at load time for catalog records."""
    if _catalog.get(record.location_id) is record:
        return _fingerprints[record.location_id]
    return make_key(record)


def clear_catalog() -> None:
    _catalog.clear()
    _fingerprints.clear()
