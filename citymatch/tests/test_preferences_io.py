from __future__ import annotations

import copy
import json

import pytest

from citymatch.engine import PreferenceImportError, export_preferences, import_preferences
from citymatch.metrics.models import League
from citymatch.preferences.models import (
    SCHEMA_VERSION,
    HousingSituation,
    PartisanPreference,
    Preferences,
    SeekingGender,
)


def test_empty_document_gives_defaults():
    assert import_preferences({}) == Preferences()
    assert import_preferences("{}") == Preferences()


def test_legacy_cultural_category_is_split():
    doc = {
        "weights": {"climate": 70, "cultural": 40},
        "advanced": {
            "cultural": {
                "partisanPreference": "strong-dem",
                "partisanWeight": 60,
                "nightlifeImportance": 80,
                "urbanLifestyleWeight": 30,
            },
        },
    }
    prefs = import_preferences(doc)
    assert prefs.weights.climate == 70
    assert prefs.weights.values == 40
    assert prefs.weights.entertainment == 30
    assert prefs.advanced.values.partisan_preference is PartisanPreference.strong_dem
    assert prefs.advanced.values.partisan_weight == 60
    assert prefs.advanced.entertainment.nightlife_importance == 80


def test_legacy_political_leaning():
    doc = {"advanced": {"political": {"preferredLeaning": "red", "strengthOfPreference": 75}}}
    prefs = import_preferences(doc)
    assert prefs.advanced.values.partisan_preference is PartisanPreference.lean_rep
    assert prefs.advanced.values.partisan_weight == 75


def test_legacy_dating_fields_are_renamed():
    doc = {
        "advanced": {
            "demographics": {
                "datingEnabled": True,
                "seekingGender": "women",
                "datingAgeRange": "30-39",
                "datingWeight": 30,
            },
        },
    }
    demo = import_preferences(doc).advanced.demographics
    assert demo.compatibility_enabled
    assert demo.seeking_gender is SeekingGender.women
    assert demo.compatibility_age_range.value == "30-39"
    assert demo.compatibility_weight == 30


def test_migration_leaves_caller_document_alone():
    doc = {"weights": {"cultural": 40}, "advanced": {"cultural": {"partisanWeight": 60}}}
    original = copy.deepcopy(doc)
    import_preferences(doc)
    assert doc == original


@pytest.mark.parametrize(
    "document",
    [
        "not json",
        "[1, 2, 3]",
        {"weights": {"climate": 150}},
        {"advanced": {"costOfLiving": {"housingSituation": "squatter"}}},
        {"filters": {"requiredLeagues": ["cricket"]}},
    ],
)
def test_malformed_documents_are_rejected(document):
    with pytest.raises(PreferenceImportError):
        import_preferences(document)


@pytest.mark.parametrize(
    "document",
    [
        {"advanced": {"cultural": {"partisanWeight": 5}, "values": None}},
        {"advanced": {"cultural": {"nightlifeImportance": 80}, "entertainment": [1, 2]}},
        {"advanced": {"political": {"preferredLeaning": "blue"}, "values": "x"}},
    ],
)
def test_legacy_blocks_over_malformed_sections_are_rejected(document):
    with pytest.raises(PreferenceImportError) as exc_info:
        import_preferences(document)
    assert exc_info.value.errors


def test_undecodable_bytes_are_rejected():
    with pytest.raises(PreferenceImportError, match="not valid JSON"):
        import_preferences(b'{"weights": "\xff"}')


def test_validation_errors_are_reported():
    with pytest.raises(PreferenceImportError) as exc_info:
        import_preferences({"weights": {"climate": -5}})
    assert exc_info.value.errors
    assert exc_info.value.errors[0]["loc"][:2] == ("weights", "climate")


def test_export_uses_camel_case_and_reimports():
    prefs = Preferences()
    prefs.weights.values = 35
    prefs.filters.required_leagues = [League.nba]
    prefs.advanced.cost_of_living.housing_situation = HousingSituation.prospective_buyer
    text = export_preferences(prefs)
    payload = json.loads(text)
    assert payload["schemaVersion"] == SCHEMA_VERSION
    assert payload["advanced"]["costOfLiving"]["housingSituation"] == "prospective-buyer"
    assert payload["filters"]["requiredLeagues"] == ["nba"]
    assert import_preferences(text) == prefs
