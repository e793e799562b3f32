"""
Gramps Web entity store.

Reads people and families from a Gramps Web instance via its REST API.
Reference: https://gramps-project.github.io/gramps-web-api/

Endpoints used:
- /api/token/ - Username/password authentication
- /api/people/ - Paged person list (with ?profile=self for vital dates)
- /api/people/{handle} - Single person
- /api/families/ - Paged family list

Every failure leaves this module as a GrampsWebError, so the HTTP layer
can answer 503 for any store outage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from genealogy_graph.core.errors import StoreError
from genealogy_graph.core.models import Family, Person
from genealogy_graph.store.base import EntityStore

logger = logging.getLogger(__name__)

Record = TypeVar("Record", bound=BaseModel)

# Status reported for failures that never produced a usable response
UNAVAILABLE = 503


@dataclass
class GrampsWebConfig:
    """Connection settings for one Gramps Web instance."""
    base_url: str
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    timeout: float = 30.0
    verify_ssl: bool = True
    page_size: int = 500
    attempts: int = 3  # per request, first try included
    backoff: float = 1.0  # seconds; doubles per retry, capped at 10


class GrampsWebError(StoreError):
    """Gramps Web answered with an error, or could not be reached."""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Gramps Web API error {status_code}: {message}")


def _is_transient(exc: BaseException) -> bool:
    """Network failures and 5xx responses are worth retrying."""
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, GrampsWebError) and exc.status_code >= 500


class GrampsWebStore(EntityStore):
    """
    Entity store backed by the Gramps Web REST API.

    Each list call pages through the whole collection, so one
    `snapshot()` reads the full population once per request. Records the
    API returns in an unexpected shape are skipped with a warning.
    """

    def __init__(self, config: GrampsWebConfig, transport: httpx.AsyncBaseTransport | None = None):
        """
        Args:
            config: Connection configuration
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._token: str | None = None

    async def connect(self) -> None:
        """Open the HTTP client and obtain a bearer token."""
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
            transport=self._transport,
        )

        if self.config.username and self.config.password:
            await self._login()
        elif self.config.api_key:
            self._token = self.config.api_key

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        await self.connect()
        return self

    # =========================================
    # Transport
    # =========================================

    async def _login(self) -> None:
        credentials = {"username": self.config.username, "password": self.config.password}
        try:
            response = await self._http().post("/api/token/", json=credentials)
            if response.status_code != 200:
                raise GrampsWebError(response.status_code, f"Authentication failed: {response.text}")
            self._token = response.json().get("access_token")
        except (httpx.HTTPError, ValueError) as e:
            raise GrampsWebError(UNAVAILABLE, f"Authentication failed: {e}") from e
        logger.debug("Logged in to Gramps Web at %s", self.config.base_url)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise GrampsWebError(UNAVAILABLE, "Store not connected")
        return self._client

    async def _send(self, endpoint: str, params: dict) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return await self._http().get(endpoint, headers=headers, params=params)

    async def _fetch_once(self, endpoint: str, params: dict) -> Any:
        """One GET; an expired token is renewed once before giving up."""
        response = await self._send(endpoint, params)
        if response.status_code == 401 and self.config.username:
            await self._login()
            response = await self._send(endpoint, params)

        if response.status_code != 200:
            raise GrampsWebError(response.status_code, response.text)
        return response.json()

    async def _get(self, endpoint: str, params: dict | None = None) -> Any:
        """
        GET with retries on transient failures.

        Raises GrampsWebError for every failure: the API's own status for
        error responses, 503 for unreachable hosts and unreadable bodies.
        """
        self._http()
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.config.attempts),
            wait=wait_exponential(multiplier=self.config.backoff, max=10),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._fetch_once(endpoint, params or {})
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Gramps Web request %s failed: %s", endpoint, e)
            raise GrampsWebError(UNAVAILABLE, f"{type(e).__name__}: {e}") from e

    async def _get_all(self, endpoint: str, params: dict | None = None) -> list:
        """Page through a list endpoint until a short page comes back."""
        items: list = []
        page = 1
        while True:
            batch = await self._get(
                endpoint,
                params={**(params or {}), "page": page, "pagesize": self.config.page_size},
            )
            if not isinstance(batch, list):
                raise GrampsWebError(UNAVAILABLE, f"{endpoint} did not return a list")
            items.extend(batch)
            if len(batch) < self.config.page_size:
                return items
            page += 1

    # =========================================
    # EntityStore
    # =========================================

    async def get_person(self, handle: str) -> Person | None:
        try:
            data = await self._get(f"/api/people/{handle}", params={"profile": "self"})
        except GrampsWebError as e:
            if e.status_code == 404:
                return None
            raise
        try:
            if not isinstance(data, dict):
                raise TypeError("not an object")
            return person_from_api(data)
        except (TypeError, ValidationError) as e:
            raise GrampsWebError(UNAVAILABLE, f"Unreadable person {handle}: {e}") from e

    async def list_people(self) -> list[Person]:
        data = await self._get_all("/api/people/", params={"profile": "self"})
        return _convert_records(data, person_from_api, "person")

    async def list_families(self) -> list[Family]:
        data = await self._get_all("/api/families/")
        return _convert_records(data, family_from_api, "family")


def _convert_records(raw: list, convert: Callable[[dict], Record], kind: str) -> list[Record]:
    """Convert API records one by one, skipping those that do not validate."""
    records = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            logger.warning("Skipping %s record #%d: not an object", kind, i)
            continue
        try:
            records.append(convert(item))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid %s record #%d (%s): %s",
                kind, i, item.get("handle", "no handle"), e.errors()[0]["msg"],
            )
    return records


def person_from_api(data: dict) -> Person:
    """Gramps Web person JSON -> Person."""
    primary_name = data.get("primary_name") or {}
    surnames = primary_name.get("surname_list") or []
    profile = data.get("profile") or {}

    return Person(
        handle=data.get("handle"),
        gramps_id=data.get("gramps_id"),
        given_name=primary_name.get("first_name") or None,
        surname=(surnames[0].get("surname") if surnames else None) or None,
        gender=data.get("gender", 2),
        birth_date=(profile.get("birth") or {}).get("date") or None,
        death_date=(profile.get("death") or {}).get("date") or None,
    )


def family_from_api(data: dict) -> Family:
    """Gramps Web family JSON -> Family."""
    return Family(
        handle=data.get("handle"),
        gramps_id=data.get("gramps_id"),
        father_handle=data.get("father_handle"),
        mother_handle=data.get("mother_handle"),
        child_handles=data.get("child_ref_list"),
    )
