"""Pydantic wire models shared by the sync client and the tournament server."""

import json
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Who issued a record's id: the device (transit id from to_wire) or the server
IdSource = Literal["local", "server"]


class WireModel(BaseModel):
    """Base for wire models: snake_case attributes, camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Serialize with wire keys, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_payload())


# ---------- Score Models ----------

class ScoreDTO(WireModel):
    """One game round for one seat."""
    id: str
    name: str
    game: int
    score: int


# ---------- Tournament Models ----------

class TournamentDTO(WireModel):
    """Transport form of a tournament; everything but id and scheduleItem is optional."""
    id: str
    id_source: IdSource = Field(default="server", exclude=True)

    # Tournament wide settings
    rotate_clockwise: Optional[bool] = None
    rule_set: Optional[str] = None
    start_date: Optional[str] = None

    # Tournament wide values
    schedule_item: int = Field(ge=0)
    last_game: Optional[int] = None

    # Player names
    fp_name: Optional[str] = None
    sp_name: Optional[str] = None
    tp_name: Optional[str] = None
    lp_name: Optional[str] = None

    # Game values
    wind_player: Optional[list[str]] = None
    current_wind: Optional[str] = None
    players: Optional[list[str]] = None
    winds: Optional[list[str]] = None
    game_winner_name: Optional[str] = None

    pt_score: Optional[dict[str, int]] = None
    pg_score: Optional[dict[str, int]] = None
    winds_to_players_in_game: Optional[dict[str, str]] = None
    players_to_winds_in_game: Optional[dict[str, str]] = None

    # Scores
    fp_scores: Optional[list[ScoreDTO]] = None
    sp_scores: Optional[list[ScoreDTO]] = None
    tp_scores: Optional[list[ScoreDTO]] = None
    lp_scores: Optional[list[ScoreDTO]] = None

    def summary(self) -> str:
        return f"{self.rule_set or 'Unknown'} : {self.current_wind or 'Unknown'}"

    def describe(self) -> str:
        names = [self.fp_name or "", self.sp_name or "", self.tp_name or "", self.lp_name or ""]
        return f"{self.start_date or 'No date'} : {' vs '.join(names)}"
