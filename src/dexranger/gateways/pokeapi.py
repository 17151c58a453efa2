import asyncio
from functools import wraps
from urllib.parse import urlparse

import httpx
from loguru import logger

from dexranger.config import DEFAULT_BASE_URL
from dexranger.gateways.errors import DexError, NetworkError, NotFoundError
from dexranger.models import CategorySlot, DetailRecord, IndexEntry, Page

# Large enough to return every entry of the list endpoint in one response
INDEX_LIMIT = 100000
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class PokeAPI:
    _base_url: str = DEFAULT_BASE_URL
    _timeout: float = 10.0
    _max_retries: int = 3
    _retry_backoff: float = 0.5
    _client: httpx.AsyncClient | None = None

    # -------------------------Settings------------------------- #

    @classmethod
    def set_base_url(cls, base_url: str | None) -> None:
        if base_url:
            cls._ensure_no_open_client()
            cls._base_url = base_url.rstrip("/")

    @classmethod
    def set_timeout(cls, timeout: float | None) -> None:
        if timeout:
            cls._ensure_no_open_client()
            cls._timeout = timeout

    @classmethod
    def set_retry_policy(cls, max_retries: int | None = None, backoff: float | None = None) -> None:
        if max_retries is not None:
            cls._max_retries = max_retries
        if backoff is not None:
            cls._retry_backoff = backoff

    @classmethod
    async def close(cls) -> None:
        """Close the shared HTTP client, if one was opened."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None

    @classmethod
    def _ensure_no_open_client(cls) -> None:
        # The shared client is built from these settings; it has to be closed first
        if cls._client is not None and not cls._client.is_closed:
            raise RuntimeError("Close the PokeAPI client before changing its connection settings")

    @classmethod
    def _get_shared_client(cls) -> httpx.AsyncClient:
        if cls._client is None or cls._client.is_closed:
            cls._client = httpx.AsyncClient(base_url=cls._base_url, timeout=cls._timeout)
        return cls._client

    # -------------------------Helpers------------------------- #

    @staticmethod
    def parse_resource_id(url: str) -> int:
        """Resolve the numeric id at the end of a resource URL.
        Args:
            url (str): Resource URL (e.g., https://pokeapi.co/api/v2/pokemon/25/)
        Returns:
            int: The trailing id (e.g., 25).
        """
        path = urlparse(url).path.rstrip("/")
        identifier = path.rsplit("/", 1)[-1]
        if not identifier.isdigit():
            raise DexError(f"Resource URL '{url}' does not end with a numeric id")

        return int(identifier)

    @staticmethod
    def to_detail_record(payload: dict) -> DetailRecord:
        """Build a DetailRecord from a /pokemon/{id} response body."""
        categories = tuple(
            CategorySlot(slot=entry["slot"], category_name=entry["type"]["name"])
            for entry in payload.get("types", [])
        )
        sprites = payload.get("sprites") or {}

        return DetailRecord(
            id=payload["id"],
            name=payload["name"],
            sprite_url=sprites.get("front_default"),
            categories=categories,
        )

    @staticmethod
    def get_client(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if not kwargs.get("client"):
                # Fall back to the shared client
                kwargs["client"] = PokeAPI._get_shared_client()
            return await func(*args, **kwargs)

        return wrapper

    @classmethod
    async def _get_json(cls, client: httpx.AsyncClient, path: str, params: dict | None = None) -> dict:
        """GET a JSON document, retrying transient failures with exponential backoff."""
        attempt = 0
        while True:
            try:
                return await cls._request_json(client, path, params)
            except NetworkError as e:
                if attempt >= cls._max_retries:
                    logger.error(f"Giving up on '{path}' after {attempt + 1} attempts: {e}")
                    raise
                delay = cls._retry_backoff * (2**attempt)
                attempt += 1
                logger.warning(f"Request to '{path}' failed ({e}); retry {attempt}/{cls._max_retries} in {delay:.2f}s")
                await asyncio.sleep(delay)

    @staticmethod
    async def _request_json(client: httpx.AsyncClient, path: str, params: dict | None) -> dict:
        try:
            response = await client.get(path, params=params)
        except httpx.TransportError as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e
        except httpx.HTTPError as e:
            # Decoding failures, redirect loops and the like are not worth retrying
            raise DexError(f"{type(e).__name__}: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Resource '{path}' not found")
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise NetworkError(f"HTTP {response.status_code} for '{path}'")
        if response.status_code >= 400:
            raise DexError(f"HTTP {response.status_code} for '{path}'")

        try:
            return response.json()
        except ValueError as e:
            raise DexError(f"Invalid JSON in response for '{path}'") from e

    # -------------------------Index------------------------- #

    @get_client
    @staticmethod
    async def fetch_all_index(*, client: httpx.AsyncClient) -> list[IndexEntry]:
        """Fetch the id + name of every known creature."""
        logger.info("Fetching the full creature index")
        payload = await PokeAPI._get_json(client, "pokemon", params={"limit": INDEX_LIMIT, "offset": 0})

        return [
            IndexEntry(id=PokeAPI.parse_resource_id(result["url"]), name=result["name"])
            for result in payload.get("results", [])
        ]

    # -------------------------Pages------------------------- #

    @get_client
    @staticmethod
    async def fetch_page(limit: int, offset: int, *, client: httpx.AsyncClient) -> Page:
        """Fetch one page of the remote list endpoint with full detail records.

        Entries whose detail lookup returns 404 are left out of the records but
        still counted in Page.requested.
        """
        logger.info(f"Fetching creature page limit={limit} offset={offset}")
        payload = await PokeAPI._get_json(client, "pokemon", params={"limit": limit, "offset": offset})

        ids = [PokeAPI.parse_resource_id(result["url"]) for result in payload.get("results", [])]
        records = await asyncio.gather(*(PokeAPI._fetch_detail_or_skip(creature_id, client) for creature_id in ids))

        return Page(
            records=[record for record in records if record is not None],
            total_count=payload.get("count", 0),
            requested=len(ids),
        )

    @staticmethod
    async def _fetch_detail_or_skip(creature_id: int, client: httpx.AsyncClient) -> DetailRecord | None:
        try:
            return await PokeAPI.fetch_detail(creature_id, client=client)
        except NotFoundError:
            logger.warning(f"Creature {creature_id} listed but not found, skipping")
            return None

    # -------------------------Categories------------------------- #

    @get_client
    @staticmethod
    async def fetch_ids_by_category(name: str, *, client: httpx.AsyncClient) -> list[int]:
        """List the ids of every creature carrying the given category (type)."""
        logger.info(f"Fetching creatures with category '{name}'")
        payload = await PokeAPI._get_json(client, f"type/{name}")

        return [PokeAPI.parse_resource_id(entry["pokemon"]["url"]) for entry in payload.get("pokemon", [])]

    # -------------------------Details------------------------- #

    @get_client
    @staticmethod
    async def fetch_detail(creature_id: int, *, client: httpx.AsyncClient) -> DetailRecord:
        """Fetch the full record of a single creature."""
        logger.debug(f"Fetching creature {creature_id}")
        payload = await PokeAPI._get_json(client, f"pokemon/{creature_id}")

        return PokeAPI.to_detail_record(payload)
