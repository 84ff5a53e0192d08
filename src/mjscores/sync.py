"""
Batch upload and download of tournaments.

Uploads are fail-soft: each tournament is sent on its own and a failure is
recorded without stopping the batch. Downloads are atomic: converted records
are buffered and committed to the local store once, so a store failure
leaves nothing from the batch behind.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from mjscores.client import TournamentAPIClient
from mjscores.convert import from_wire, to_wire
from mjscores.domain import Tournament
from mjscores.errors import StoreError, SyncError
from mjscores.models import TournamentDTO
from mjscores.reconcile import AlwaysNewReconciler, IdentityReconciler, Reconciliation
from mjscores.store import BaseTournamentStore

logger = logging.getLogger("mjscores.sync")

ProgressCallback = Callable[[str], None]


@dataclass
class SyncResult:
    """Aggregate outcome of one batch."""
    kind: str  # "upload" or "download"
    success_count: int = 0
    failures: list[tuple[object, Exception]] = field(default_factory=list)
    uploaded: list[TournamentDTO] = field(default_factory=list)
    downloaded: list[Tournament] = field(default_factory=list)
    cancelled: bool = False

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def clean(self) -> bool:
        """True when nothing failed; callers may dismiss their progress display."""
        return not self.failures and not self.cancelled

    def status_message(self) -> str:
        if self.kind == "download":
            return f"Download complete: {self.success_count} tournament(s) downloaded"
        return f"Sync complete: {self.success_count} successful, {self.failure_count} failed"


def select_remote(remote: Iterable[TournamentDTO], ids: Iterable[str]) -> list[TournamentDTO]:
    """Keep the remote tournaments whose id was selected, in server order."""
    wanted = set(ids)
    return [t for t in remote if t.id in wanted]


class SyncOrchestrator:
    """
    Drives uploads and downloads between a local store and a server.

    One batch runs at a time; concurrent callers wait for the running batch.
    """

    def __init__(
        self,
        client: TournamentAPIClient,
        store: BaseTournamentStore,
        reconciler: Optional[IdentityReconciler] = None,
    ):
        self.client = client
        self.store = store
        self.reconciler = reconciler or AlwaysNewReconciler()
        self._batch_lock = threading.Lock()
        self.cancel_requested = False

    def cancel(self):
        """
        Stop the running batch before its next item.

        A cancel sent while no batch runs, or while a caller waits for the
        lock, applies to the next batch. The flag clears when a batch ends.
        """
        logger.info("Cancel requested. Finishing current item...")
        self.cancel_requested = True

    @staticmethod
    def _report(on_progress: Optional[ProgressCallback], message: str):
        logger.debug(message)
        if on_progress is not None:
            on_progress(message)

    # ---------- Upload ----------

    def upload(self, tournaments: Iterable[Tournament], on_progress: Optional[ProgressCallback] = None) -> SyncResult:
        """
        Upload each tournament with one create call.

        Per-item errors, including records that do not fit the wire schema,
        are collected in the result; the remaining items are still attempted.
        """
        with self._batch_lock:
            try:
                return self._upload(list(tournaments), on_progress)
            finally:
                self.cancel_requested = False

    def _upload(self, tournaments: list[Tournament], on_progress: Optional[ProgressCallback]) -> SyncResult:
        result = SyncResult(kind="upload")
        self._report(on_progress, "Starting sync...")
        logger.info(f"Uploading {len(tournaments)} tournament(s) to {self.client.base_url}")

        for tournament in tournaments:
            if self.cancel_requested:
                result.cancelled = True
                break

            self._report(on_progress, f"Uploading tournament: {tournament.rule_set or 'Unknown'}...")
            if not tournament.wind_maps_consistent():
                logger.warning(f"Tournament {tournament.local_id} has mismatched wind/player maps; sending as is")

            try:
                stored = self.client.create_tournament(to_wire(tournament))
            except (SyncError, ValidationError) as e:
                logger.error(f"✗ Upload of tournament {tournament.local_id} failed: {e}")
                result.failures.append((tournament, e))
                continue

            result.success_count += 1
            result.uploaded.append(stored)
            logger.info(f"✓ Uploaded tournament {tournament.local_id} as {stored.id}")

        self._report(on_progress, result.status_message())
        return result

    # ---------- Download ----------

    def list_remote(self, on_progress: Optional[ProgressCallback] = None) -> list[TournamentDTO]:
        """
        List the tournaments available on the server.

        Errors propagate; there is no partial result.
        """
        self._report(on_progress, "Fetching tournaments from server...")
        try:
            remote = self.client.list_tournaments()
        except SyncError:
            self._report(on_progress, "Failed to fetch tournaments")
            raise
        self._report(on_progress, f"Found {len(remote)} tournament(s) on server")
        return remote

    def download(self, remote: Iterable[TournamentDTO], on_progress: Optional[ProgressCallback] = None) -> SyncResult:
        """
        Convert the selected remote tournaments and store them in one commit.

        Records that resolve to the same local tournament within one batch
        are stored and counted once, with the last one winning.

        Raises:
            StoreError: If the store rejects the batch; nothing is kept
        """
        with self._batch_lock:
            try:
                return self._download(list(remote), on_progress)
            finally:
                self.cancel_requested = False

    def _download(self, remote: list[TournamentDTO], on_progress: Optional[ProgressCallback]) -> SyncResult:
        result = SyncResult(kind="download")
        self._report(on_progress, "Downloading tournaments...")
        logger.info(f"Downloading {len(remote)} tournament(s) from {self.client.base_url}")

        self.reconciler.begin_batch(self.store)
        pending: list[Reconciliation] = []
        positions: dict[str, int] = {}  # local_id -> index in pending
        for dto in remote:
            if self.cancel_requested:
                result.cancelled = True
                break
            self._report(on_progress, f"Downloading: {dto.rule_set or 'Unknown'}...")
            item = self.reconciler.reconcile(from_wire(dto), self.store)

            local_id = item.tournament.local_id
            if local_id in positions:
                earlier = pending[positions[local_id]]
                logger.info(f"Remote {dto.id} repeats tournament {local_id} in this batch, keeping the later copy")
                pending[positions[local_id]] = Reconciliation(item.tournament, replaces=earlier.replaces)
                continue
            positions[local_id] = len(pending)
            pending.append(item)

        try:
            for item in pending:
                if item.replaces is not None:
                    self.store.delete(item.replaces)
                self.store.insert(item.tournament)
            self.store.commit()
        except StoreError as e:
            logger.error(f"Saving downloaded tournaments failed, rolling back: {e}")
            self._rollback()
            self._report(on_progress, "Failed to save tournaments")
            raise

        result.success_count = len(pending)
        result.downloaded = [item.tournament for item in pending]
        logger.info(f"✓ Stored {result.success_count} downloaded tournament(s)")
        self._report(on_progress, result.status_message())
        return result

    def _rollback(self):
        try:
            self.store.rollback()
        except StoreError as e:
            logger.error(f"Rollback failed: {e}")
