"""Tests for the PokeAPI gateway against a mocked HTTP transport."""

import httpx
import pytest

from dexranger.gateways.errors import DexError, NetworkError, NotFoundError
from dexranger.gateways.pokeapi import INDEX_LIMIT, PokeAPI
from dexranger.models import CategorySlot
from dexranger.services.creature_list import CreatureListService

BASE_URL = "https://pokeapi.test/api/v2"


def resource_url(kind: str, creature_id: int) -> str:
    return f"{BASE_URL}/{kind}/{creature_id}/"


def detail_payload(creature_id: int, name: str, *types: str) -> dict:
    return {
        "id": creature_id,
        "name": name,
        "sprites": {"front_default": f"https://sprites.test/{creature_id}.png"},
        "types": [
            {"slot": slot, "type": {"name": type_name, "url": f"{BASE_URL}/type/{slot}/"}}
            for slot, type_name in enumerate(types, start=1)
        ],
    }


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)


# ============= Helpers =============


def test_parse_resource_id():
    assert PokeAPI.parse_resource_id("https://pokeapi.co/api/v2/pokemon/25/") == 25
    assert PokeAPI.parse_resource_id("https://pokeapi.co/api/v2/pokemon/10034") == 10034


def test_parse_resource_id_rejects_named_urls():
    with pytest.raises(DexError):
        PokeAPI.parse_resource_id("https://pokeapi.co/api/v2/pokemon/pikachu/")


def test_to_detail_record_keeps_slots():
    record = PokeAPI.to_detail_record(detail_payload(6, "charizard", "fire", "flying"))

    assert record.id == 6
    assert record.name == "charizard"
    assert record.sprite_url == "https://sprites.test/6.png"
    assert record.categories == (CategorySlot(1, "fire"), CategorySlot(2, "flying"))
    assert record.category_names == ["fire", "flying"]


def test_to_detail_record_without_sprite():
    payload = detail_payload(7, "squirtle", "water")
    payload["sprites"] = {"front_default": None}

    assert PokeAPI.to_detail_record(payload).sprite_url is None


# ============= Endpoints =============


@pytest.mark.asyncio
async def test_fetch_all_index():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v2/pokemon"
        assert request.url.params["limit"] == str(INDEX_LIMIT)
        assert request.url.params["offset"] == "0"
        return httpx.Response(
            200,
            json={
                "count": 2,
                "results": [
                    {"name": "bulbasaur", "url": resource_url("pokemon", 1)},
                    {"name": "ivysaur", "url": resource_url("pokemon", 2)},
                ],
            },
        )

    async with make_client(handler) as client:
        entries = await PokeAPI.fetch_all_index(client=client)

    assert [(entry.id, entry.name) for entry in entries] == [(1, "bulbasaur"), (2, "ivysaur")]


@pytest.mark.asyncio
async def test_fetch_page_fetches_details_for_each_result():
    requested_details = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v2/pokemon":
            assert request.url.params["limit"] == "2"
            assert request.url.params["offset"] == "4"
            return httpx.Response(
                200,
                json={
                    "count": 1302,
                    "results": [
                        {"name": "charmeleon", "url": resource_url("pokemon", 5)},
                        {"name": "charizard", "url": resource_url("pokemon", 6)},
                    ],
                },
            )
        creature_id = int(request.url.path.rsplit("/", 1)[-1])
        requested_details.append(creature_id)
        name = {5: "charmeleon", 6: "charizard"}[creature_id]
        return httpx.Response(200, json=detail_payload(creature_id, name, "fire"))

    async with make_client(handler) as client:
        page = await PokeAPI.fetch_page(2, 4, client=client)

    assert page.total_count == 1302
    assert [record.id for record in page.records] == [5, 6]
    assert sorted(requested_details) == [5, 6]


@pytest.mark.asyncio
async def test_fetch_ids_by_category():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v2/type/fire"
        return httpx.Response(
            200,
            json={
                "name": "fire",
                "pokemon": [
                    {"slot": 1, "pokemon": {"name": "charmander", "url": resource_url("pokemon", 4)}},
                    {"slot": 2, "pokemon": {"name": "charizard", "url": resource_url("pokemon", 6)}},
                ],
            },
        )

    async with make_client(handler) as client:
        assert await PokeAPI.fetch_ids_by_category("fire", client=client) == [4, 6]


@pytest.mark.asyncio
async def test_fetch_detail():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v2/pokemon/25"
        return httpx.Response(200, json=detail_payload(25, "pikachu", "electric"))

    async with make_client(handler) as client:
        record = await PokeAPI.fetch_detail(25, client=client)

    assert record.name == "pikachu"
    assert record.category_names == ["electric"]


# ============= Errors =============


@pytest.mark.asyncio
async def test_not_found_is_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        return httpx.Response(404, text="Not Found")

    async with make_client(handler) as client:
        with pytest.raises(NotFoundError):
            await PokeAPI.fetch_detail(99999, client=client)

    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_transient_errors_are_retried():
    PokeAPI.set_retry_policy(max_retries=2, backoff=0)
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=detail_payload(1, "bulbasaur", "grass", "poison"))

    async with make_client(handler) as client:
        record = await PokeAPI.fetch_detail(1, client=client)

    assert record.name == "bulbasaur"
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_network_error_raised_after_retries_exhausted():
    PokeAPI.set_retry_policy(max_retries=1, backoff=0)
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(NetworkError, match="ConnectError"):
            await PokeAPI.fetch_detail(1, client=client)

    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_rate_limit_is_treated_as_transient():
    PokeAPI.set_retry_policy(max_retries=0, backoff=0)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429)

    async with make_client(handler) as client:
        with pytest.raises(NetworkError):
            await PokeAPI.fetch_ids_by_category("fire", client=client)


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    PokeAPI.set_retry_policy(max_retries=3, backoff=0)
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        return httpx.Response(400)

    async with make_client(handler) as client:
        with pytest.raises(DexError) as excinfo:
            await PokeAPI.fetch_detail(1, client=client)

    assert not isinstance(excinfo.value, (NetworkError, NotFoundError))
    assert len(attempts) == 1


# ============= Settings =============


@pytest.mark.asyncio
async def test_shared_client_uses_configured_base_url():
    PokeAPI.set_base_url("https://mirror.test/api/v2/")
    PokeAPI.set_timeout(3.0)

    client = PokeAPI._get_shared_client()
    try:
        assert str(client.base_url) == "https://mirror.test/api/v2/"
        assert client.timeout.read == 3.0
        assert PokeAPI._get_shared_client() is client
    finally:
        await PokeAPI.close()

    assert PokeAPI._client is None


@pytest.mark.asyncio
async def test_changing_settings_with_an_open_client_is_rejected():
    client = PokeAPI._get_shared_client()

    with pytest.raises(RuntimeError):
        PokeAPI.set_base_url("https://mirror.test/api/v2")
    with pytest.raises(RuntimeError):
        PokeAPI.set_timeout(3.0)
    assert PokeAPI._get_shared_client() is client

    await PokeAPI.close()
    PokeAPI.set_base_url("https://mirror.test/api/v2")
    assert PokeAPI._base_url == "https://mirror.test/api/v2"


# ============= Service over HTTP =============


def list_payload(*names: str) -> dict:
    return {
        "count": len(names),
        "results": [{"name": name, "url": resource_url("pokemon", i)} for i, name in enumerate(names, start=1)],
    }


@pytest.mark.asyncio
async def test_unfiltered_page_skips_missing_details(monkeypatch):
    names = {1: "bulbasaur", 2: "ivysaur", 3: "venusaur"}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v2/pokemon":
            return httpx.Response(200, json=list_payload(*names.values()))
        creature_id = int(request.url.path.rsplit("/", 1)[-1])
        if creature_id == 2:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, json=detail_payload(creature_id, names[creature_id], "grass"))

    client = make_client(handler)
    monkeypatch.setattr(PokeAPI, "_client", client)
    service = CreatureListService(source=PokeAPI, page_size=3)
    try:
        await service.bootstrap()
    finally:
        await client.aclose()

    assert [record.id for record in service.state.items] == [1, 3]
    assert service.state.offset == 3
    assert service.state.has_more is False
    assert service.state.error is None


@pytest.mark.asyncio
async def test_fetch_page_counts_skipped_entries_as_requested():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v2/pokemon":
            return httpx.Response(200, json=list_payload("bulbasaur", "ivysaur"))
        return httpx.Response(404, text="Not Found")

    async with make_client(handler) as client:
        page = await PokeAPI.fetch_page(2, 0, client=client)

    assert page.records == []
    assert page.requested == 2


@pytest.mark.asyncio
async def test_undecodable_body_is_reported_as_dex_error(monkeypatch):
    PokeAPI.set_retry_policy(max_retries=3, backoff=0)
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

    async with make_client(handler) as client:
        with pytest.raises(DexError) as excinfo:
            await PokeAPI.fetch_all_index(client=client)
    assert not isinstance(excinfo.value, NetworkError)
    assert len(attempts) == 1

    client = make_client(handler)
    monkeypatch.setattr(PokeAPI, "_client", client)
    service = CreatureListService(source=PokeAPI)
    try:
        await service.bootstrap()
    finally:
        await client.aclose()

    assert not service.bootstrapped
    assert "DecodingError" in service.state.error
