"""Tests for the wire model and local <-> wire conversion."""
import json

import pytest
from pydantic import ValidationError

from mjscores.convert import from_wire, to_wire
from mjscores.domain import Score, Tournament
from mjscores.models import ScoreDTO, TournamentDTO


@pytest.fixture
def full_tournament():
    """A tournament with every field populated."""
    t = Tournament("Alice", "Bob", "Carol", "Dave", "South", "Bob")
    t.rotate_clockwise = True
    t.rule_set = "Hong Kong"
    t.start_date = "2026-03-14"
    t.schedule_item = 3
    t.last_game = 2
    t.wind_player = ["East", "South", "West", "North"]
    t.players = ["Alice", "Bob", "Carol", "Dave"]
    t.winds = ["East", "South", "West", "North"]
    t.pt_score = {"Alice": 10, "Bob": 4, "Carol": -6, "Dave": -8}
    t.pg_score = {"Alice": 2, "Bob": 8, "Carol": -4, "Dave": -6}
    t.winds_to_players_in_game = {"East": "Alice", "South": "Bob", "West": "Carol", "North": "Dave"}
    t.players_to_winds_in_game = {"Alice": "East", "Bob": "South", "Carol": "West", "Dave": "North"}
    t.fp_scores = [Score(id="s1", name="Alice", game=1, score=8), Score(id="s2", name="Alice", game=2, score=2)]
    t.sp_scores = [Score(id="s3", name="Bob", game=1, score=-4)]
    t.tp_scores = [Score(id="s4", name="Carol", game=1, score=-2)]
    t.lp_scores = []
    return t


def test_to_wire_copies_every_field(full_tournament):
    """Test that to_wire copies all business fields verbatim."""
    dto = to_wire(full_tournament)

    assert dto.fp_name == "Alice"
    assert dto.lp_name == "Dave"
    assert dto.current_wind == "South"
    assert dto.game_winner_name == "Bob"
    assert dto.rule_set == "Hong Kong"
    assert dto.schedule_item == 3
    assert dto.last_game == 2
    assert dto.pt_score == {"Alice": 10, "Bob": 4, "Carol": -6, "Dave": -8}
    assert dto.winds_to_players_in_game["West"] == "Carol"
    assert [s.id for s in dto.fp_scores] == ["s1", "s2"]
    assert dto.lp_scores == []


def test_to_wire_issues_local_transit_id(full_tournament):
    """Test that each conversion gets a fresh, locally issued id."""
    first = to_wire(full_tournament)
    second = to_wire(full_tournament)

    assert first.id != second.id
    assert first.id_source == "local"


def test_to_wire_fills_missing_score_values():
    """Test that missing score name/game/score become "" / 0 / 0."""
    t = Tournament("A", "B", "C", "D", "East", "")
    t.fp_scores = [Score(id="s1")]

    dto = to_wire(t)

    assert dto.fp_scores == [ScoreDTO(id="s1", name="", game=0, score=0)]


def test_payload_uses_wire_keys_and_omits_absent_fields():
    """Test that serialization uses camelCase keys and drops None values."""
    t = Tournament("A", "B", "C", "D", "East", "")
    t.pt_score = {"A": 1}

    payload = to_wire(t).to_payload()

    assert payload["fpName"] == "A"
    assert payload["scheduleItem"] == 0
    assert payload["ptScore"] == {"A": 1}
    assert "ruleSet" not in payload
    assert "lastGame" not in payload
    assert "fpScores" not in payload
    assert "idSource" not in payload
    assert None not in payload.values()
    assert json.loads(to_wire(t).to_json()) == payload


def test_dto_accepts_wire_keys():
    """Test that a camelCase document validates into the model."""
    dto = TournamentDTO.model_validate({
        "id": "t-1",
        "scheduleItem": 1,
        "ruleSet": "Riichi",
        "windsToPlayersInGame": {"East": "Mei"},
        "fpScores": [{"id": "s1", "name": "Mei", "game": 1, "score": 100}],
    })

    assert dto.rule_set == "Riichi"
    assert dto.winds_to_players_in_game == {"East": "Mei"}
    assert dto.fp_scores[0].score == 100
    assert dto.id_source == "server"


def test_schedule_item_is_required_and_non_negative():
    """Test scheduleItem validation."""
    with pytest.raises(ValidationError):
        TournamentDTO.model_validate({"id": "t-1"})
    with pytest.raises(ValidationError):
        TournamentDTO.model_validate({"id": "t-1", "scheduleItem": -1})


def test_from_wire_defaults_for_missing_fields():
    """Test the documented defaults for absent optional wire fields."""
    inputs = from_wire(TournamentDTO(id="t-1", schedule_item=0))

    assert inputs.fp_name == ""
    assert inputs.sp_name == ""
    assert inputs.tp_name == ""
    assert inputs.lp_name == ""
    assert inputs.current_wind == "East"
    assert inputs.game_winner_name == ""
    assert inputs.remote_id == "t-1"

    tournament = inputs.build()
    assert tournament.current_wind == "East"
    assert tournament.rule_set is None
    assert tournament.fp_scores is None


def test_from_wire_keeps_empty_strings():
    """Test that present-but-empty values are not replaced by defaults."""
    inputs = from_wire(TournamentDTO(id="t-1", schedule_item=0, current_wind=""))
    assert inputs.current_wind == ""


def test_round_trip_reproduces_tournament(full_tournament):
    """Test that from_wire(to_wire(r)) reproduces every field."""
    restored = from_wire(to_wire(full_tournament)).build()

    assert restored == full_tournament
    assert restored.local_id != full_tournament.local_id


def test_round_trip_is_default_stable():
    """Test that absent fields come back as defaults and a second trip is idempotent."""
    t = Tournament("A", "B", "C", "D", None, None)
    t.fp_scores = [Score(id="s1", game=4)]

    once = from_wire(to_wire(t)).build()
    assert once.current_wind == "East"
    assert once.game_winner_name == ""
    assert once.fp_scores == [Score(id="s1", name="", game=4, score=0)]

    first = to_wire(once).to_payload()
    second = to_wire(from_wire(to_wire(once)).build()).to_payload()
    first.pop("id")
    second.pop("id")
    assert first == second


def test_build_does_not_share_mutable_values(full_tournament):
    """Test that built tournaments own their lists and maps."""
    inputs = from_wire(to_wire(full_tournament))
    a = inputs.build()
    b = inputs.build()

    a.pt_score["Alice"] = 999
    a.fp_scores.append(Score(id="extra"))

    assert b.pt_score["Alice"] == 10
    assert len(b.fp_scores) == 2


def test_wind_maps_consistent(full_tournament):
    """Test the bidirectional wind/player map check."""
    assert full_tournament.wind_maps_consistent()

    full_tournament.players_to_winds_in_game["Alice"] = "West"
    assert not full_tournament.wind_maps_consistent()
