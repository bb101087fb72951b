"""
Tests for the command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from facilityslots.cli.app import app


runner = CliRunner()

DATA = {
    "facilities": [{"id": "court-1", "name": "Court 1"}],
    "bookings": [
        {
            "id": "bk-1",
            "facilityId": "court-1",
            "startTime": "2030-01-07T10:00:00",
            "endTime": "2030-01-07T11:00:00",
            "customerName": "Dana",
        }
    ],
    "classSessions": [
        {"id": "yoga-1", "classId": "yoga", "startTime": "2030-01-07T18:00:00", "endTime": "2030-01-07T19:00:00"}
    ],
}


@pytest.fixture
def config_file(tmp_path):
    (tmp_path / "data.json").write_text(json.dumps(DATA), encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text("timezone: UTC\ndata_file: data.json\n", encoding="utf-8")
    return path


def test_slots_json(config_file):
    result = runner.invoke(
        app,
        ["slots", "court-1", "--date", "2030-01-07", "--json", "--config", str(config_file)],
    )

    assert result.exit_code == 0, result.output
    slots = json.loads(result.output)
    assert len(slots) == 15
    assert slots[1] == {"startTime": "09:30", "endTime": "10:30", "isAvailable": False}


def test_slots_range_only_available(config_file):
    result = runner.invoke(
        app,
        [
            "slots", "court-1",
            "--date", "2030-01-06",
            "--days", "2",
            "--only-available",
            "--json",
            "--config", str(config_file),
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert list(payload) == ["2030-01-06", "2030-01-07"]
    assert payload["2030-01-06"] == []
    assert len(payload["2030-01-07"]) == 12


def test_slots_table(config_file):
    result = runner.invoke(app, ["slots", "court-1", "--date", "2030-01-07", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "09:00" in result.output
    assert "booked" in result.output


def test_invalid_date(config_file):
    result = runner.invoke(app, ["slots", "court-1", "--date", "07.01.2030", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_invalid_duration(config_file):
    result = runner.invoke(
        app,
        ["slots", "court-1", "--date", "2030-01-07", "--duration", "0", "--config", str(config_file)],
    )

    assert result.exit_code == 1
    assert "Duration must be positive" in result.output


def test_hours_for_unknown_facility(config_file):
    result = runner.invoke(app, ["hours", "ghost", "--date", "2030-01-07", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "09:00-17:00" in result.output
    assert "defaults applied" in result.output


def test_conflicts_json(config_file):
    result = runner.invoke(
        app,
        [
            "conflicts", "court-1",
            "--session", "2030-01-07T10:30:00/2030-01-07T11:30:00",
            "--json",
            "--config", str(config_file),
        ],
    )

    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["conflictStatus"] is True
    assert report["conflicts"][0]["id"] == "bk-1"


def test_class_slots(config_file):
    result = runner.invoke(app, ["class-slots", "yoga", "--date", "2030-01-07", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "18:00" in result.output


def test_missing_config_file(tmp_path):
    result = runner.invoke(app, ["slots", "court-1", "--config", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_slots_range_uses_configured_length(config_file):
    config_file.write_text(
        "timezone: UTC\ndata_file: data.json\ndefaults:\n  range_days: 3\n",
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["slots", "court-1", "--date", "2030-01-07", "--range", "--json", "--config", str(config_file)],
    )

    assert result.exit_code == 0, result.output
    assert list(json.loads(result.output)) == ["2030-01-07", "2030-01-08", "2030-01-09"]


def test_hours_json(config_file):
    result = runner.invoke(
        app,
        ["hours", "court-1", "--date", "2030-01-12", "--json", "--config", str(config_file)],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "facilityId": "court-1",
        "date": "2030-01-12",
        "weekday": "saturday",
        "hours": {"open": "10:00", "close": "15:00"},
        "defaulted": False,
    }
