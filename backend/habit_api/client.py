"""
Habit Tracker Backend — HTTP Client with Read Cache
====================================================

What:  Python client for the /habit API, for scripts, tools and tests.
Why:   Gives non-browser callers the same contract the web frontend's data
       layer has: cached reads, mutations that invalidate the cache, errors
       surfaced with their machine-readable code.
How:   Wraps an httpx.Client. Reads fill a small dict cache (one list entry,
       one entry per habit id); every successful mutation clears it so the
       next read refetches.
Who:   Used directly by callers; tests hand it a FastAPI TestClient, which
       is an httpx.Client subclass bound to an in-process app.

Usage:
    with HabitClient("http://localhost:8000") as client:
        habit = client.create_habit({
            "nome": "Meditar",
            "descricao": None,
            "categoria": "Bem-estar",
            "icone": "sparkles",
            "fuso_horario": "America/Sao_Paulo",
        })
        client.archive_habit(habit["id"], "Não uso mais")

Nothing is retried: creating twice after a timeout would fail with
DUPLICATE_NAME, and the caller is the one who knows whether that is fine.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

_LIST_KEY = "__list__"


class HabitApiError(Exception):
    """
    A failure envelope returned by the API.

    Attributes:
        code:        Error kind, e.g. DUPLICATE_NAME, NOT_FOUND
        message:     Human-readable message from the server
        status_code: HTTP status of the response
        details:     Field violations for VALIDATION_ERROR, else None
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: Optional[Any] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(f"{code}: {message}")


class HabitClient:
    """
    Cached client for the habit API.

    Args:
        base_url:    Server root, e.g. "http://localhost:8000"
        http_client: An existing httpx.Client to use instead of creating one.
                     The caller keeps ownership: close() does not close it.
        prefix:      Route prefix configured on the server (API_PREFIX)
        timeout:     Request timeout in seconds for an owned client
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        prefix: str = "",
        timeout: float = 10.0,
    ):
        if http_client is None and base_url is None:
            raise ValueError("Either base_url or http_client is required")
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._path = prefix.rstrip("/") + "/habit"
        self._cache: Dict[str, Any] = {}

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "HabitClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def invalidate(self) -> None:
        """Drop every cached read; the next read goes to the server."""
        self._cache.clear()

    # ── Transport ─────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        kwargs = {} if json is None else {"json": json}
        response = self._http.request(method, path, **kwargs)

        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise HabitApiError("INVALID_RESPONSE", "Response is not JSON", response.status_code)

        if not response.is_success or not payload.get("success", False):
            error = payload.get("error") or {}
            raise HabitApiError(
                code=error.get("code", "HTTP_ERROR"),
                message=error.get("message", response.reason_phrase),
                status_code=response.status_code,
                details=error.get("details"),
            )
        return payload["data"]

    def _mutate(self, method: str, path: str, json: Any = None) -> Any:
        data = self._request(method, path, json)
        self.invalidate()
        return data

    # ── Reads ─────────────────────────────────────────────────────────────

    def list_habits(self, refresh: bool = False) -> List[Dict[str, Any]]:
        """Habit summaries, served from cache unless `refresh` is set."""
        if refresh or _LIST_KEY not in self._cache:
            self._cache[_LIST_KEY] = self._request("GET", self._path)
        return [dict(habit) for habit in self._cache[_LIST_KEY]]

    def get_habit(self, habit_id: str, refresh: bool = False) -> Dict[str, Any]:
        if refresh or habit_id not in self._cache:
            self._cache[habit_id] = self._request("GET", f"{self._path}/{habit_id}")
        return dict(self._cache[habit_id])

    def search_habits(self, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on nome, over the cached list."""
        needle = query.lower()
        return [habit for habit in self.list_habits() if needle in habit["nome"].lower()]

    # ── Mutations ─────────────────────────────────────────────────────────

    def create_habit(self, data: Dict[str, Any]) -> Dict[str, Any]:
        habit = self._mutate("POST", self._path, data)
        logger.debug("Created habit %s", habit["id"])
        return habit

    def update_habit(self, habit_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate("PUT", f"{self._path}/{habit_id}", data)

    def delete_habit(self, habit_id: str) -> str:
        return self._mutate("DELETE", f"{self._path}/{habit_id}")["message"]

    def archive_habit(self, habit_id: str, reason: str) -> str:
        body = {"motivo_arquivamento": reason}
        return self._mutate("POST", f"{self._path}/{habit_id}/archive", body)["message"]

    def restore_habit(self, habit_id: str) -> str:
        return self._mutate("POST", f"{self._path}/{habit_id}/restore")["message"]
