"""Tests for the mjscores-sync command line and sample data."""
import json
import os
import tempfile
from unittest.mock import MagicMock, patch

import pytest
import requests

from mjscores.cli import main
from mjscores.seed import SAMPLE_TOURNAMENTS, seed_sample_tournaments
from mjscores.store import SQLiteTournamentStore


@pytest.fixture
def temp_db():
    """Create a temporary database path for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup
    os.unlink(db_path)


@pytest.fixture
def base_args(temp_db, tmp_path):
    return ["--db", temp_db, "--settings", str(tmp_path / "settings.yaml")]


def make_response(status_code, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


def test_seed_builds_consistent_tournaments(temp_db):
    """Test that sample tournaments are stored with matching wind maps and totals."""
    with SQLiteTournamentStore(temp_db) as store:
        seeded = seed_sample_tournaments(store)
        stored = store.query_all()

    assert len(stored) == len(SAMPLE_TOURNAMENTS)
    assert stored == seeded
    for tournament in stored:
        assert tournament.wind_maps_consistent()

    hong_kong = stored[0]
    assert hong_kong.pt_score == {"Alice": -6, "Bob": 24, "Carol": -4, "Dave": -14}
    assert hong_kong.game_winner_name == "Bob"
    assert [s.score for s in hong_kong.sp_scores] == [8, 16]
    assert stored[2].game_winner_name == ""


def test_config_show_and_set(base_args, capsys):
    """Test showing and persisting the server URL."""
    assert main(base_args + ["config", "http://mj.local:8080/"]) == 0
    assert "Server URL saved: http://mj.local:8080" in capsys.readouterr().out

    assert main(base_args + ["config"]) == 0
    out = capsys.readouterr().out
    assert "Server URL: http://mj.local:8080" in out
    assert "AppConfig Configuration:" in out
    assert "SETTINGS_PATH" in out


def test_config_rejects_bad_url(base_args, capsys):
    """Test that a malformed URL is refused."""
    assert main(base_args + ["config", "nonsense"]) == 2
    assert "Invalid server URL" in capsys.readouterr().out


def test_local_lists_seeded(base_args, capsys):
    """Test seed then local listing."""
    assert main(base_args + ["seed"]) == 0
    capsys.readouterr()

    assert main(base_args + ["local"]) == 0
    out = capsys.readouterr().out
    assert "Riichi : East" in out
    assert "2026-03-14 : Alice vs Bob vs Carol vs Dave" in out


def test_upload_all(base_args, capsys):
    """Test uploading every local tournament."""
    main(base_args + ["seed"])
    capsys.readouterr()

    def echo(method, url, **kwargs):
        return make_response(201, json.loads(kwargs["data"]))

    with patch("requests.request", side_effect=echo) as mock_request:
        code = main(base_args + ["--server", "http://mj.local:8080", "upload", "--all"])

    out = capsys.readouterr().out
    assert code == 0
    assert mock_request.call_count == len(SAMPLE_TOURNAMENTS)
    assert f"Sync complete: {len(SAMPLE_TOURNAMENTS)} successful, 0 failed" in out
    assert "Status: Connected" in out


def test_upload_with_failures_exits_nonzero(base_args, capsys):
    """Test that failed items are listed and the exit code is 1."""
    main(base_args + ["seed"])
    capsys.readouterr()

    with patch("requests.request", side_effect=requests.exceptions.ConnectionError("refused")):
        code = main(base_args + ["upload", "--all"])

    out = capsys.readouterr().out
    assert code == 1
    assert f"Sync complete: 0 successful, {len(SAMPLE_TOURNAMENTS)} failed" in out
    assert "Network error" in out
    assert "Status: Not Connected" in out


def test_upload_nothing_selected(base_args, capsys):
    """Test that an empty selection does not report a sync."""
    assert main(base_args + ["upload", "no-such-id"]) == 2
    out = capsys.readouterr().out
    assert "Nothing selected" in out
    assert "Sync complete" not in out


def test_download_selected(base_args, temp_db, capsys):
    """Test downloading the selected remote tournaments."""
    body = [
        {"id": "r1", "scheduleItem": 0, "ruleSet": "Riichi"},
        {"id": "r2", "scheduleItem": 1, "ruleSet": "American"},
    ]
    with patch("requests.request", return_value=make_response(200, body)):
        code = main(base_args + ["download", "r2"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Found 2 tournament(s) on server" in out
    assert "Download complete: 1 tournament(s) downloaded" in out

    with SQLiteTournamentStore(temp_db) as store:
        assert [t.rule_set for t in store.query_all()] == ["American"]


def test_download_list_failure_is_terminal(base_args, temp_db, capsys):
    """Test that a failed refresh prints one error and downloads nothing."""
    with patch("requests.request", return_value=make_response(503)):
        code = main(base_args + ["download", "--all"])

    out = capsys.readouterr().out
    assert code == 1
    assert "Sync error: Unexpected status code: 503" in out
    assert "Download complete" not in out

    with SQLiteTournamentStore(temp_db) as store:
        assert store.query_all() == []


def test_remote_listing(base_args, capsys):
    """Test listing remote tournaments."""
    body = [{"id": "r1", "scheduleItem": 0, "ruleSet": "Riichi", "fpName": "Mei"}]
    with patch("requests.request", return_value=make_response(200, body)):
        assert main(base_args + ["remote"]) == 0

    out = capsys.readouterr().out
    assert "r1  Riichi : Unknown" in out
    assert "No date : Mei vs  vs  vs " in out
