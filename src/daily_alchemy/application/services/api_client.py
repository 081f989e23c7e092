"""HTTP client for the Daily Alchemy API."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import requests

from daily_alchemy.application.interfaces import IGameApi, ILoggingService
from daily_alchemy.domain.models import CreativeSave, OracleResult, Puzzle, SlotSummary
from daily_alchemy.domain.services import GameMechanics
from daily_alchemy.errors import CombinationFailed, PersistenceNetworkError, PuzzleUnavailable


class GameApiClient(IGameApi):
    """
    requests-based implementation of IGameApi.

    Blocking HTTP calls run in a worker thread so the controller's event
    loop keeps ticking. There are no retries; a failed call surfaces as the
    domain error for its endpoint.
    """

    ENDPOINTS = {
        "puzzle": "/daily-alchemy/puzzle",
        "combine": "/daily-alchemy/combine",
        "complete": "/daily-alchemy/complete",
        "creative_save": "/daily-alchemy/creative/save",
        "creative_saves": "/daily-alchemy/creative/saves",
        "leaderboard_daily": "/leaderboard/daily",
    }

    def __init__(
        self,
        base_url: str,
        logging_service: ILoggingService,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: API root, e.g. https://example.com/api
            logging_service: Service for logging
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
            token_provider: Returns the bearer token for authenticated calls
        """
        self.base_url = base_url.rstrip("/")
        self.logger = logging_service
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token_provider = token_provider

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{self.ENDPOINTS[endpoint]}"

    def _headers(self, auth: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if auth and self.token_provider:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        auth: bool = False,
    ) -> requests.Response:
        self.logger.debug(f"🌐 {method} {self.ENDPOINTS[endpoint]} params={params or {}}")
        return self.session.request(
            method,
            self._url(endpoint),
            params=params,
            json=body,
            headers=self._headers(auth),
            timeout=self.timeout,
        )

    async def _call(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        return await asyncio.to_thread(self._request, method, endpoint, **kwargs)

    async def _persistence_call(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Authenticated call whose failures become PersistenceNetworkError."""
        try:
            response = await self._call(method, endpoint, auth=True, **kwargs)
        except requests.exceptions.RequestException as e:
            raise PersistenceNetworkError(f"{method} {endpoint} failed: {e}") from e

        if not response.ok:
            raise PersistenceNetworkError(
                f"{method} {endpoint} returned HTTP {response.status_code}", status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError:
            return {}

    # Oracle

    async def combine(self, element_a: str, element_b: str, user_id: Optional[str], mode: str) -> OracleResult:
        body = {"elementA": element_a, "elementB": element_b, "userId": user_id, "mode": mode}
        try:
            response = await self._call("POST", "combine", body=body)
        except requests.exceptions.RequestException as e:
            raise CombinationFailed(f"Combination request failed: {e}") from e

        if not response.ok:
            raise CombinationFailed(f"Combination service returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CombinationFailed("Combination service returned malformed JSON") from e

        result = data.get("result") if isinstance(data, dict) else None
        if not data.get("success") or not isinstance(result, dict) or not result.get("element"):
            raise CombinationFailed("Invalid combination result")

        return OracleResult(
            element=result["element"],
            emoji=result.get("emoji") or "",
            is_first_discovery=bool(result.get("isFirstDiscovery", False)),
        )

    # Daily puzzle

    async def fetch_puzzle(self, puzzle_date: str) -> Puzzle:
        message = GameMechanics.PUZZLE_UNAVAILABLE_MESSAGE
        try:
            response = await self._call("GET", "puzzle", params={"date": puzzle_date})
        except requests.exceptions.RequestException as e:
            raise PuzzleUnavailable(message) from e

        if not response.ok:
            self.logger.warning(f"Puzzle fetch for {puzzle_date} returned HTTP {response.status_code}")
            raise PuzzleUnavailable(message, status_code=response.status_code)

        try:
            data = response.json()
            if not data.get("success") or not data.get("puzzle"):
                raise PuzzleUnavailable(message, status_code=response.status_code)
            raw = dict(data["puzzle"])
            raw.setdefault("date", puzzle_date)
            return Puzzle.from_dict(raw)
        except (ValueError, KeyError, TypeError) as e:
            raise PuzzleUnavailable(message, status_code=response.status_code) from e

    async def record_completion(self, record: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._persistence_call("POST", "complete", body=record)
        return data.get("stats") or {}

    async def submit_leaderboard(self, entry: Dict[str, Any]) -> None:
        await self._persistence_call("POST", "leaderboard_daily", body=entry)

    # Creative saves

    async def load_creative_save(self, slot_number: int) -> Optional[CreativeSave]:
        data = await self._persistence_call("GET", "creative_save", params={"slot": slot_number})
        save = data.get("save")
        if not data.get("hasSave", bool(save)) or not save:
            return None
        return CreativeSave.from_dict(save, slot_number=slot_number)

    async def save_creative(self, save: CreativeSave) -> Optional[str]:
        data = await self._persistence_call("POST", "creative_save", body=save.to_dict())
        return data.get("savedAt")

    async def rename_creative_save(self, slot_number: int, name: str) -> None:
        await self._persistence_call("PATCH", "creative_save", body={"slotNumber": slot_number, "name": name})

    async def delete_creative_save(self, slot_number: int) -> None:
        await self._persistence_call("DELETE", "creative_save", params={"slot": slot_number})

    async def list_creative_saves(self) -> List[SlotSummary]:
        data = await self._persistence_call("GET", "creative_saves")
        return [SlotSummary.from_dict(raw) for raw in data.get("saves") or []]

    def close(self) -> None:
        self.session.close()
