from __future__ import annotations

import copy
import json
import logging
from typing import Any

from pydantic import ValidationError

from .models import SCHEMA_VERSION, Preferences

logger = logging.getLogger(__name__)


class PreferenceImportError(ValueError):
    """Raised when an imported preference document cannot be applied."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


# Keys that lived under advanced.cultural before values and entertainment
# became separate categories.
_VALUES_KEYS = (
    "partisanPreference",
    "partisanWeight",
    "preferHighTurnout",
    "religiousTraditions",
    "minTraditionPresence",
    "traditionsWeight",
    "preferReligiousDiversity",
    "diversityWeight",
)

_ENTERTAINMENT_KEYS = (
    "nightlifeImportance",
    "artsImportance",
    "diningImportance",
    "sportsImportance",
)

_DATING_RENAMES = {
    "datingEnabled": "compatibilityEnabled",
    "datingAgeRange": "compatibilityAgeRange",
    "datingWeight": "compatibilityWeight",
}

_LEANING_TO_PARTISAN = {
    "blue": "lean-dem",
    "red": "lean-rep",
    "neutral": "neutral",
}


def _section(parent: dict[str, Any], key: str) -> dict[str, Any] | None:
    """The mapping under ``key``, created when absent.

    Returns None when the key holds something other than a mapping; that
    value is left in place for validation to reject.
    """
    section = parent.setdefault(key, {})
    return section if isinstance(section, dict) else None


def _migrate(document: dict[str, Any]) -> dict[str, Any]:
    """Rewrite legacy layouts into the current schema.

    Works on a deep copy; the caller's document is never touched.
    """
    doc = copy.deepcopy(document)
    weights = doc.get("weights")
    advanced = doc.get("advanced")
    if not isinstance(weights, dict):
        weights = None
    if not isinstance(advanced, dict):
        advanced = None

    # v1: a single "cultural" category covered politics, religion and nightlife
    if weights is not None and "cultural" in weights and "values" not in weights:
        weights["values"] = weights.pop("cultural")

    if advanced is not None:
        legacy_cultural = advanced.pop("cultural", None)
        if isinstance(legacy_cultural, dict):
            values = _section(advanced, "values")
            entertainment = _section(advanced, "entertainment")
            for key in _VALUES_KEYS:
                if values is not None and key in legacy_cultural:
                    values.setdefault(key, legacy_cultural[key])
            for key in _ENTERTAINMENT_KEYS:
                if entertainment is not None and key in legacy_cultural:
                    entertainment.setdefault(key, legacy_cultural[key])
            urban_weight = legacy_cultural.get("urbanLifestyleWeight")
            if weights is not None and urban_weight is not None:
                weights.setdefault("entertainment", urban_weight)

        legacy_political = advanced.pop("political", None)
        values = _section(advanced, "values") if isinstance(legacy_political, dict) else None
        if values is not None:
            leaning = legacy_political.get("preferredLeaning")
            if leaning in _LEANING_TO_PARTISAN:
                values.setdefault("partisanPreference", _LEANING_TO_PARTISAN[leaning])
            strength = legacy_political.get("strengthOfPreference")
            if strength is not None:
                values.setdefault("partisanWeight", strength)

        demographics = advanced.get("demographics")
        if isinstance(demographics, dict):
            for old, new in _DATING_RENAMES.items():
                if old in demographics:
                    demographics.setdefault(new, demographics.pop(old))

        qol = advanced.get("qualityOfLife")
        if isinstance(qol, dict):
            if "minPhysiciansPer100k" in qol:
                qol.setdefault("minPhysiciansPer100K", qol.pop("minPhysiciansPer100k"))
            # recreation sub-weights used to be named "...Importance" with an
            # overall recreationWeight alongside the per-factor weights
            rec_weight = qol.pop("recreationWeight", None)
            qol_weights = qol.get("weights")
            if rec_weight is not None and isinstance(qol_weights, dict):
                qol_weights.setdefault("recreation", rec_weight)

    doc["schemaVersion"] = SCHEMA_VERSION
    doc.pop("schema_version", None)
    return doc


def import_preferences(document: str | bytes | dict[str, Any]) -> Preferences:
    """Validate a serialized preference document into a ``Preferences`` tree.

    Accepts JSON text or an already-parsed mapping. Documents produced by
    older schema versions are migrated first; fields they lack fall back to
    defaults. Raises ``PreferenceImportError`` with nothing applied when the
    document is malformed.
    """
    if isinstance(document, (str, bytes)):
        try:
            parsed = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Rejected preference document: invalid JSON (%s)", exc)
            raise PreferenceImportError(f"Preference document is not valid JSON: {exc}") from exc
    else:
        parsed = document

    if not isinstance(parsed, dict):
        logger.warning("Rejected preference document: top level is %s", type(parsed).__name__)
        raise PreferenceImportError("Preference document must be a JSON object")

    try:
        return Preferences.model_validate(_migrate(parsed))
    except ValidationError as exc:
        logger.warning("Rejected preference document: %d validation error(s)", exc.error_count())
        raise PreferenceImportError(
            "Preference document failed validation",
            errors=exc.errors(include_url=False),
        ) from exc


def export_preferences(prefs: Preferences) -> str:
    """Serialize preferences as the camelCase JSON document the UI stores."""
    return prefs.model_dump_json(by_alias=True, indent=2)
