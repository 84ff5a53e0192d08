"""
Sample tournaments for development and testing.

Fills a local store with a few realistic tournaments so uploads can be tried
without entering games by hand.
"""

import logging

from mjscores.domain import Score, Tournament
from mjscores.store import BaseTournamentStore

logger = logging.getLogger("mjscores.seed")

WINDS = ["East", "South", "West", "North"]

# ---------- Sample Data ----------

SAMPLE_TOURNAMENTS = [
    {
        "players": ["Alice", "Bob", "Carol", "Dave"],
        "rule_set": "Hong Kong",
        "start_date": "2026-03-14",
        "rotate_clockwise": False,
        "games": [(2, 8, -4, -6), (-8, 16, 0, -8)],
    },
    {
        "players": ["Mei", "Jun", "Hana", "Ravi"],
        "rule_set": "Riichi",
        "start_date": "2026-04-02",
        "rotate_clockwise": True,
        "games": [(12000, -4000, -4000, -4000)],
    },
    {
        "players": ["Tom", "Ann", "Lou", "Kit"],
        "rule_set": "American",
        "start_date": "2026-05-20",
        "rotate_clockwise": False,
        "games": [],
    },
]


def build_sample_tournament(sample: dict) -> Tournament:
    """Build a tournament with per-seat scores and consistent wind maps."""
    players = sample["players"]
    games = sample["games"]
    winner = ""
    if games:
        last = games[-1]
        winner = players[last.index(max(last))]

    tournament = Tournament(*players, WINDS[0], winner)
    tournament.rule_set = sample["rule_set"]
    tournament.start_date = sample["start_date"]
    tournament.rotate_clockwise = sample["rotate_clockwise"]
    tournament.schedule_item = len(games)
    tournament.last_game = len(games) if games else None
    tournament.players = list(players)
    tournament.winds = list(WINDS)
    tournament.wind_player = list(WINDS)
    tournament.winds_to_players_in_game = dict(zip(WINDS, players))
    tournament.players_to_winds_in_game = dict(zip(players, WINDS))

    totals = {name: 0 for name in players}
    seat_scores = [[] for _ in players]
    for game_number, points in enumerate(games, start=1):
        for seat, (name, value) in enumerate(zip(players, points)):
            seat_scores[seat].append(Score(name=name, game=game_number, score=value))
            totals[name] += value

    tournament.pt_score = totals
    tournament.pg_score = dict(zip(players, games[-1])) if games else {name: 0 for name in players}
    tournament.fp_scores, tournament.sp_scores, tournament.tp_scores, tournament.lp_scores = seat_scores
    return tournament


def seed_sample_tournaments(store: BaseTournamentStore) -> list[Tournament]:
    """Insert the sample tournaments and commit."""
    logger.info("Seeding sample tournaments...")
    tournaments = [build_sample_tournament(sample) for sample in SAMPLE_TOURNAMENTS]
    for tournament in tournaments:
        store.insert(tournament)
    store.commit()
    logger.info(f"Seeded {len(tournaments)} sample tournament(s)")
    return tournaments
