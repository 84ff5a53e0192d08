"""
Conversion between local tournaments and their wire form.

All default substitution for absent wire values happens here, so neither the
client nor the orchestrator needs its own fallbacks.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Optional

from mjscores.domain import SEATS, Score, Tournament, new_id
from mjscores.models import ScoreDTO, TournamentDTO

DEFAULT_WIND = "East"

# Attributes copied one-to-one between Tournament and TournamentDTO
PLAIN_FIELDS = (
    "rotate_clockwise",
    "rule_set",
    "start_date",
    "schedule_item",
    "last_game",
    "wind_player",
    "players",
    "winds",
    "pt_score",
    "pg_score",
    "winds_to_players_in_game",
    "players_to_winds_in_game",
)


@dataclass
class TournamentInputs:
    """Everything needed to build a local Tournament from a wire record."""
    fp_name: str
    sp_name: str
    tp_name: str
    lp_name: str
    current_wind: str
    game_winner_name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    remote_id: Optional[str] = None

    def build(self) -> Tournament:
        """Construct a new local tournament and set the remaining attributes."""
        tournament = Tournament(
            self.fp_name,
            self.sp_name,
            self.tp_name,
            self.lp_name,
            self.current_wind,
            self.game_winner_name,
        )
        for name, value in self.attributes.items():
            setattr(tournament, name, copy.deepcopy(value))
        return tournament


def _default(value, default):
    return value if value is not None else default


def _score_to_wire(score: Score) -> ScoreDTO:
    return ScoreDTO(
        id=score.id,
        name=_default(score.name, ""),
        game=_default(score.game, 0),
        score=_default(score.score, 0),
    )


def _score_from_wire(score: ScoreDTO) -> Score:
    return Score(id=score.id, name=score.name, game=score.game, score=score.score)


def to_wire(tournament: Tournament) -> TournamentDTO:
    """
    Convert a local tournament to its wire form.

    A fresh transit id is generated and flagged as locally issued; the server
    may keep or replace it. Score fields that are missing locally are sent as
    "" / 0 / 0.
    """
    values = {name: copy.deepcopy(getattr(tournament, name)) for name in PLAIN_FIELDS}
    for seat in SEATS:
        scores = getattr(tournament, f"{seat}_scores")
        values[f"{seat}_scores"] = (
            [_score_to_wire(s) for s in scores] if scores is not None else None
        )

    return TournamentDTO(
        id=new_id(),
        id_source="local",
        fp_name=tournament.fp_name,
        sp_name=tournament.sp_name,
        tp_name=tournament.tp_name,
        lp_name=tournament.lp_name,
        current_wind=tournament.current_wind,
        game_winner_name=tournament.game_winner_name,
        **values,
    )


def from_wire(dto: TournamentDTO) -> TournamentInputs:
    """
    Turn a wire record into constructor inputs for a local tournament.

    Missing seat names and winner name become "", a missing current wind
    becomes "East".
    """
    attributes = {name: copy.deepcopy(getattr(dto, name)) for name in PLAIN_FIELDS}
    for seat in SEATS:
        scores = getattr(dto, f"{seat}_scores")
        attributes[f"{seat}_scores"] = (
            [_score_from_wire(s) for s in scores] if scores is not None else None
        )

    return TournamentInputs(
        fp_name=_default(dto.fp_name, ""),
        sp_name=_default(dto.sp_name, ""),
        tp_name=_default(dto.tp_name, ""),
        lp_name=_default(dto.lp_name, ""),
        current_wind=_default(dto.current_wind, DEFAULT_WIND),
        game_winner_name=_default(dto.game_winner_name, ""),
        attributes=attributes,
        remote_id=dto.id,
    )
