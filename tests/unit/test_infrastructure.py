# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Infrastructure tests — config, logging, error types and data models.
"""

import pytest
from pydantic import ValidationError


# ─── Config ──────────────────────────────────────────────────────────────────

def test_settings_defaults():
    from brickmatch.config import Settings

    settings = Settings(_env_file=None)
    assert settings.review_confidence_threshold == pytest.approx(0.7)
    assert settings.rematch_min_score == pytest.approx(0.3)
    assert settings.batch_max_workers == 4
    assert settings.log_level == "INFO"


def test_settings_read_environment(monkeypatch):
    from brickmatch.config import Settings

    monkeypatch.setenv("REVIEW_CONFIDENCE_THRESHOLD", "0.55")
    monkeypatch.setenv("batch_max_workers", "8")

    settings = Settings(_env_file=None)
    assert settings.review_confidence_threshold == pytest.approx(0.55)
    assert settings.batch_max_workers == 8


def test_settings_reject_out_of_range(monkeypatch):
    from brickmatch.config import Settings

    monkeypatch.setenv("REVIEW_CONFIDENCE_THRESHOLD", "1.5")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    from brickmatch.config import get_settings

    assert get_settings() is get_settings()


# ─── Logging ─────────────────────────────────────────────────────────────────

def test_configure_logging_json_output(capsys):
    import json

    import structlog

    from brickmatch.utils.logger import configure_logging, get_logger

    configure_logging()
    try:
        get_logger("brickmatch.test").info("test_event", set_id="70618-1")
        line = capsys.readouterr().err.strip().splitlines()[-1]
    finally:
        structlog.reset_defaults()

    entry = json.loads(line)
    assert entry["event"] == "test_event"
    assert entry["set_id"] == "70618-1"
    assert entry["app"] == "brickmatch"
    assert entry["level"] == "info"


def test_bound_stage_logged_as_label(capsys):
    import json

    import structlog

    from brickmatch.models.pairing import MatchStage
    from brickmatch.utils.logger import configure_logging, get_logger

    configure_logging()
    log = get_logger("brickmatch.test")
    try:
        with structlog.contextvars.bound_contextvars(stage=MatchStage.GREEDY_FALLBACK):
            log.info("inside_stage")
        log.info("after_stage")
        lines = capsys.readouterr().err.strip().splitlines()
    finally:
        structlog.reset_defaults()

    inside, after = json.loads(lines[-2]), json.loads(lines[-1])
    assert inside["stage"] == "greedy-fallback"
    assert "stage" not in after


# ─── Error Types ─────────────────────────────────────────────────────────────

def test_check_unit_interval():
    from brickmatch.exceptions import InvalidConfidenceError, check_unit_interval

    assert check_unit_interval(0.0, "x") == 0.0
    assert check_unit_interval(1.0, "x") == 1.0
    with pytest.raises(InvalidConfidenceError, match="outside"):
        check_unit_interval(1.01, "pairing")
    with pytest.raises(InvalidConfidenceError):
        check_unit_interval(float("nan"), "pairing")


def test_error_types_subclass_builtins():
    from brickmatch.exceptions import (
        InvalidConfidenceError,
        ManualApprovalViolationError,
        RosterValidationError,
    )

    assert issubclass(InvalidConfidenceError, ValueError)
    assert issubclass(RosterValidationError, ValueError)
    assert issubclass(ManualApprovalViolationError, RuntimeError)


# ─── Data Models ─────────────────────────────────────────────────────────────

def test_pairing_rejects_out_of_range_confidence():
    from brickmatch.models.pairing import MatchStage, Pairing

    with pytest.raises(ValidationError):
        Pairing(catalog_a_id="a", catalog_b_id="b", confidence=1.2,
                source=MatchStage.SINGLE_FIG)


def test_catalog_entry_validity():
    from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry

    assert CatalogAEntry(id="fig-1").is_valid
    assert not CatalogAEntry(id=None).is_valid
    assert not CatalogBEntry(id="   ").is_valid


def test_catalog_b_quantity_must_be_positive():
    from brickmatch.models.catalog import CatalogBEntry

    with pytest.raises(ValidationError):
        CatalogBEntry(id="b1", quantity_in_set=0)


def test_roster_from_plain_dict():
    from brickmatch.models.catalog import SetRoster

    roster = SetRoster.model_validate({
        "set_id": "70618-1",
        "catalog_a": [{"id": "fig-1", "display_name": "Kai"}, {"display_name": "Ghost"}],
        "catalog_b": [{"id": "njo1", "display_name": "Kai", "quantity_in_set": 2}],
    })

    assert len(roster.valid_catalog_a) == 1
    assert roster.total_figures == 1
    assert roster.catalog_b[0].quantity_in_set == 2


def test_roster_requires_set_id():
    from brickmatch.models.catalog import SetRoster

    with pytest.raises(ValidationError):
        SetRoster(set_id="")
