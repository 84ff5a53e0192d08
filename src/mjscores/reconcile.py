"""
Identity reconciliation for downloaded tournaments.

Decides whether a record pulled from the server becomes a new local
tournament or replaces one already on the device. The server's id is never
used for this: it is a transport id, not a business identity.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from mjscores.convert import TournamentInputs
from mjscores.domain import Tournament
from mjscores.store import BaseTournamentStore

logger = logging.getLogger("mjscores.reconcile")


@dataclass
class Reconciliation:
    """Outcome for one downloaded record."""
    tournament: Tournament
    replaces: Optional[Tournament] = None  # local record to delete before inserting


class IdentityReconciler(ABC):
    """Base class for download identity policies."""

    def begin_batch(self, store: BaseTournamentStore) -> None:
        """Called once before a download batch starts."""
        pass

    @abstractmethod
    def reconcile(self, inputs: TournamentInputs, store: BaseTournamentStore) -> Reconciliation:
        pass


class AlwaysNewReconciler(IdentityReconciler):
    """
    Every downloaded record becomes a new local tournament.

    Downloading the same remote tournament twice leaves two local copies.
    """

    def reconcile(self, inputs: TournamentInputs, store: BaseTournamentStore) -> Reconciliation:
        return Reconciliation(tournament=inputs.build())


def business_key(rule_set, start_date, names) -> tuple:
    """Natural key of a tournament: rule set, start date and the four seats."""
    return (rule_set, start_date, tuple(names))


class BusinessKeyReconciler(IdentityReconciler):
    """
    Match downloads to local tournaments by business key.

    Key: (rule_set, start_date, (fp, sp, tp, lp)). A match is overwritten by
    the downloaded values (last write wins) and keeps its local id.
    """

    def __init__(self):
        self._known: dict[tuple, Tournament] = {}

    @staticmethod
    def key_of(tournament: Tournament) -> tuple:
        return business_key(tournament.rule_set, tournament.start_date, tournament.player_names())

    def begin_batch(self, store: BaseTournamentStore) -> None:
        self._known = {self.key_of(t): t for t in store.query_all()}

    def reconcile(self, inputs: TournamentInputs, store: BaseTournamentStore) -> Reconciliation:
        tournament = inputs.build()
        key = self.key_of(tournament)
        existing = self._known.get(key)
        self._known[key] = tournament

        if existing is None:
            return Reconciliation(tournament=tournament)

        logger.info(f"Downloaded tournament matches local {existing.local_id}, overwriting")
        tournament.local_id = existing.local_id
        return Reconciliation(tournament=tournament, replaces=existing)
