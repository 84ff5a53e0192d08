"""
Local tournament records.

These are the objects the scoring screens create and mutate on the device.
Scoring and wind rotation happen elsewhere; this module only holds the values
that travel between the local store and the server.
"""
import uuid
from dataclasses import asdict, dataclass, field, fields
from typing import Optional

SEATS = ("fp", "sp", "tp", "lp")  # first, second, third, last player


def new_id() -> str:
    """Generate an opaque identifier."""
    return str(uuid.uuid4())


@dataclass
class Score:
    """One recorded game round for one player seat."""
    id: str = field(default_factory=new_id)
    name: Optional[str] = None
    game: Optional[int] = None
    score: Optional[int] = None


@dataclass
class Tournament:
    """A multi-round Mahjong tournament as kept in the local store."""
    # Required by the constructor
    fp_name: str
    sp_name: str
    tp_name: str
    lp_name: str
    current_wind: str
    game_winner_name: str

    # Tournament wide settings
    rotate_clockwise: Optional[bool] = None
    rule_set: Optional[str] = None
    start_date: Optional[str] = None  # carried opaquely, never parsed

    # Tournament wide values
    schedule_item: int = 0
    last_game: Optional[int] = None

    # Game values
    wind_player: Optional[list[str]] = None
    players: Optional[list[str]] = None
    winds: Optional[list[str]] = None

    pt_score: Optional[dict[str, int]] = None
    pg_score: Optional[dict[str, int]] = None
    winds_to_players_in_game: Optional[dict[str, str]] = None
    players_to_winds_in_game: Optional[dict[str, str]] = None

    # Scores, one list per seat
    fp_scores: Optional[list[Score]] = None
    sp_scores: Optional[list[Score]] = None
    tp_scores: Optional[list[Score]] = None
    lp_scores: Optional[list[Score]] = None

    # Local persistent identity, never sent to the server
    local_id: str = field(default_factory=new_id, compare=False)

    def player_names(self) -> tuple[str, str, str, str]:
        return (self.fp_name, self.sp_name, self.tp_name, self.lp_name)

    def wind_maps_consistent(self) -> bool:
        """Check that the wind->player and player->wind maps mirror each other."""
        forward = self.winds_to_players_in_game or {}
        reverse = self.players_to_winds_in_game or {}
        if len(forward) != len(reverse):
            return False
        return all(reverse.get(player) == wind for wind, player in forward.items())

    def label(self) -> str:
        return f"{self.rule_set or 'Unknown'} : {self.current_wind or 'Unknown'}"

    def describe(self) -> str:
        return f"{self.start_date or 'No date'} : {' vs '.join(self.player_names())}"

    def to_dict(self) -> dict:
        """Plain dict for local persistence (scores become dicts too)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Tournament":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for seat in SEATS:
            key = f"{seat}_scores"
            if values.get(key) is not None:
                values[key] = [Score(**s) for s in values[key]]
        return cls(**values)
