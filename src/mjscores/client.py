"""
HTTP client for the tournament server.

One call is one round trip: nothing is retried, batched or cached here.
Every failure is raised as a SyncError subclass for the caller to handle.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlparse

import requests
from pydantic import TypeAdapter, ValidationError

from mjscores.config import AppConfig
from mjscores.errors import DecodeError, NetworkError, NotFound, UnexpectedStatus
from mjscores.models import TournamentDTO

logger = logging.getLogger("mjscores.client")

_TOURNAMENT_LIST = TypeAdapter(list[TournamentDTO])


def normalize_base_url(url: str) -> str:
    """
    Validate a server URL and strip any trailing slash.

    Raises:
        ValueError: If the URL is not a well-formed http(s) URL
    """
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid server URL: {url!r}")
    return url.rstrip("/")


@dataclass(frozen=True)
class ConnectionStatus:
    """Read-only snapshot of the client's connectivity."""
    is_connected: bool = False
    last_error: Optional[str] = None


class TournamentAPIClient:
    """Client for the /tournaments resource of a tournament server."""

    def __init__(self, base_url: str, timeout: float = AppConfig.HTTP_TIMEOUT):
        """
        Initialize the client.

        Args:
            base_url: Server base URL (e.g., "http://localhost:8080")
            timeout: Per-request timeout in seconds
        """
        self.base_url = normalize_base_url(base_url)
        self.timeout = timeout
        self._status = ConnectionStatus()
        self._listeners: list[Callable[[ConnectionStatus], None]] = []

    # ---------- Status ----------

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def is_connected(self) -> bool:
        return self._status.is_connected

    def subscribe(self, callback: Callable[[ConnectionStatus], None]) -> Callable[[], None]:
        """
        Register a callback for status changes.

        Returns:
            A function that removes the callback again
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_status(self, is_connected: bool, last_error: Optional[str]):
        new_status = ConnectionStatus(is_connected=is_connected, last_error=last_error)
        if new_status == self._status:
            return
        self._status = new_status
        for callback in list(self._listeners):
            callback(new_status)

    # ---------- Transport ----------

    def _url(self, tournament_id: Optional[str] = None) -> str:
        if tournament_id is None:
            return f"{self.base_url}/tournaments"
        return f"{self.base_url}/tournaments/{tournament_id}"

    def _send(self, method: str, url: str, body: Optional[TournamentDTO] = None) -> requests.Response:
        """Perform one round trip, mapping transport failures to NetworkError."""
        kwargs = {"timeout": self.timeout}
        if body is not None:
            kwargs["data"] = body.to_json().encode("utf-8")
            kwargs["headers"] = {"Content-Type": "application/json"}

        logger.debug(f"{method} {url}")
        try:
            response = requests.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            # No response: connectivity flag stays as it was
            logger.warning(f"{method} {url} failed: {type(e).__name__}")
            logger.debug(f"Connection error details: {e}")
            error = NetworkError(e)
            self._set_status(self._status.is_connected, str(error))
            raise error from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        self._set_status(True, self._status.last_error)
        return response

    def _check(self, response: requests.Response, expected: int, resource: Optional[str] = None):
        """Raise for any status other than `expected`; 404 means NotFound for single resources."""
        if response.status_code == expected:
            return
        if resource is not None and response.status_code == 404:
            error = NotFound(resource)
        else:
            error = UnexpectedStatus(response.status_code)
        self._set_status(True, str(error))
        raise error

    def _decode(self, response: requests.Response, adapter):
        try:
            data = response.json()
        except ValueError as e:
            error = DecodeError(f"Invalid JSON response: {e}")
            self._set_status(True, str(error))
            raise error from e
        try:
            result = adapter(data)
        except ValidationError as e:
            error = DecodeError(f"Response does not match tournament schema: {e}")
            self._set_status(True, str(error))
            raise error from e
        self._set_status(True, None)
        return result

    # ---------- Operations ----------

    def create_tournament(self, tournament: TournamentDTO) -> TournamentDTO:
        """
        Upload a tournament.

        Returns:
            The tournament as stored by the server (its id may differ)

        Raises:
            UnexpectedStatus: For anything but 201 Created
            NetworkError: If no response was received
            DecodeError: If the body is not a tournament
        """
        response = self._send("POST", self._url(), tournament)
        self._check(response, 201)
        return self._decode(response, TournamentDTO.model_validate)

    def list_tournaments(self) -> list[TournamentDTO]:
        """List all tournaments on the server."""
        response = self._send("GET", self._url())
        self._check(response, 200)
        return self._decode(response, _TOURNAMENT_LIST.validate_python)

    def get_tournament(self, tournament_id: str) -> TournamentDTO:
        """Fetch one tournament; NotFound if the server has no such id."""
        url = self._url(tournament_id)
        response = self._send("GET", url)
        self._check(response, 200, resource=f"tournament {tournament_id}")
        return self._decode(response, TournamentDTO.model_validate)

    def update_tournament(self, tournament_id: str, tournament: TournamentDTO) -> TournamentDTO:
        """Replace a tournament on the server; NotFound if the id is unknown."""
        url = self._url(tournament_id)
        response = self._send("PUT", url, tournament)
        self._check(response, 200, resource=f"tournament {tournament_id}")
        return self._decode(response, TournamentDTO.model_validate)

    def delete_tournament(self, tournament_id: str) -> None:
        """Delete a tournament; NotFound if the id is unknown."""
        url = self._url(tournament_id)
        response = self._send("DELETE", url)
        self._check(response, 204, resource=f"tournament {tournament_id}")
        self._set_status(True, None)
