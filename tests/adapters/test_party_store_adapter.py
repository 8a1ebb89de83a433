from __future__ import annotations

import asyncio
import json
from dataclasses import replace
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from santapy.adapters.http_resilience import ResilientClient
from santapy.adapters.party_store import PartyStoreClient, error_for_status
from santapy.adapters.party_store.client import (
    _should_cache_payload,  # type: ignore[reportPrivateUsage]
)
from santapy.config import CacheConfig, ResilienceConfig, StoreConfig
from santapy.domain.errors import (
    AuthorizationDenied,
    GenerationConflict,
    GenerationInfeasible,
    PartyNotFound,
    PartyStoreError,
    StoreUnavailable,
)
from santapy.domain.model import PartyStatus
from santapy.domain.ports import GenerationRequest, PartyUpdate

BASE_URL = "https://santa.example/api/"

PARTY = {
    "id": "party-1",
    "user_id": 1,
    "status": "active",
    "party_date": "2025-12-24T18:00:00Z",
    "location": " ",
    "max_amount": "25.00",
    "personal_message": None,
    "host_can_see_all": True,
    "host_email": "alice@example.com",
    "access_token": "party-token",
}

PARTICIPANTS = [
    {
        "id": index,
        "party_id": "party-1",
        "user_id": 1 if index == 1 else None,
        "name": name,
        "email": f"{name.lower()}@example.com",
        "is_host": index == 1,
        "assigned_to": None,
        "wishlist": None,
        "wishlist_description": None,
        "access_token": f"token-{index}",
    }
    for index, name in enumerate(["Alice", "Bob", "Carol"], start=1)
]


def _envelope(data: object) -> dict[str, object]:
    return {"success": True, "data": data}


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=BASE_URL, transport=httpx.MockTransport(async_handler)
        )
        return client

    return factory


def _store(handler: Callable[[httpx.Request], httpx.Response]) -> PartyStoreClient:
    config = StoreConfig(
        base_url=BASE_URL,
        resilience=ResilienceConfig(name="party-store-test", base_url=BASE_URL),
    )
    return PartyStoreClient(config=config, client_factory=_make_client_factory(handler))


def test_fetch_party_parses_details() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=_envelope(
                {
                    "party": PARTY,
                    "participants": PARTICIPANTS,
                    "assignments": [
                        {"id": 10, "party_id": "party-1", "giver_id": 1, "receiver_id": 2},
                        {"id": 11, "party_id": "party-1", "giver_id": 2, "receiver_id": 3},
                        {"id": 12, "party_id": "party-1", "giver_id": 3, "receiver_id": 1},
                    ],
                    "userParticipant": PARTICIPANTS[0],
                }
            ),
        )

    snapshot = asyncio.run(_store(handler).fetch_party("party-1"))

    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/parties/party-1"
    assert snapshot.party.status is PartyStatus.ACTIVE
    assert snapshot.party.location is None
    assert snapshot.party.max_amount == 25.0
    assert snapshot.party.party_date is not None
    assert [p.name for p in snapshot.participants] == ["Alice", "Bob", "Carol"]
    assert snapshot.host is not None
    assert snapshot.host.id == 1
    assert [(a.giver_id, a.receiver_id) for a in snapshot.assignments] == [(1, 2), (2, 3), (3, 1)]
    assert snapshot.user_participant is not None
    assert snapshot.user_participant.id == 1


def test_fetch_party_by_token_sends_query() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(
            200,
            json=_envelope(
                {"party": PARTY, "participants": PARTICIPANTS, "userParticipant": PARTICIPANTS[1]}
            ),
        )

    snapshot = asyncio.run(_store(handler).fetch_party_by_token("token-2"))

    assert seen[0].path == "/api/parties/by-token"
    assert seen[0].params["token"] == "token-2"
    assert snapshot.assignments == ()
    assert snapshot.user_participant is not None
    assert snapshot.user_participant.id == 2


def test_fetch_assignments_accepts_nested_rows() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/parties/party-1/assignments"
        return httpx.Response(
            200,
            json=_envelope(
                {
                    "generated": True,
                    "assignments": [
                        {
                            "id": 10,
                            "giver": {"id": 1, "name": "Alice", "email": "alice@example.com"},
                            "receiver": {"id": 2, "name": "Bob", "email": "bob@example.com"},
                            "createdAt": "2025-11-01T10:00:00Z",
                        }
                    ],
                    "myAssignment": {
                        "receiver": {"id": 2, "name": "Bob", "email": "bob@example.com"},
                        "wishlist": "Socks",
                        "wishlistDescription": "Wool, size 44",
                    },
                }
            ),
        )

    remote = asyncio.run(_store(handler).fetch_assignments("party-1"))

    assert remote.generated
    row = remote.assignments[0]
    assert (row.giver_id, row.receiver_id) == (1, 2)
    assert row.party_id == "party-1"
    assert row.giver_name == "Alice"
    assert row.receiver_email == "bob@example.com"
    assert remote.my_assignment is not None
    assert remote.my_assignment.receiver.name == "Bob"
    assert remote.my_assignment.wishlist_description == "Wool, size 44"


def test_fetch_public_assignments_not_generated() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/parties/party-1/assignments/public"
        assert request.url.params["token"] == "token-3"
        return httpx.Response(200, json=_envelope({"generated": False}))

    remote = asyncio.run(_store(handler).fetch_assignments_by_token("party-1", "token-3"))

    assert not remote.generated
    assert remote.assignments == ()
    assert remote.my_assignment is None


def test_generate_sends_camel_case_body() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/parties/party-1/assignments/generate"
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200, json=_envelope({"assignmentsCreated": 3, "emailsSent": 3, "seed": 7})
        )

    request = GenerationRequest(
        regenerate=True,
        force_regenerate=True,
        send_emails=False,
        lock_after_generation=True,
        max_attempts=50,
        seed=7,
    )
    summary = asyncio.run(_store(handler).generate_assignments("party-1", request))

    assert bodies == [
        {
            "regenerate": True,
            "forceRegenerate": True,
            "sendEmails": False,
            "lockAfterGeneration": True,
            "maxAttempts": 50,
            "seed": 7,
        }
    ]
    assert summary.assignments_created == 3
    assert summary.emails_sent == 3
    assert summary.seed == 7


@pytest.mark.parametrize(
    ("status", "payload", "expected", "message"),
    [
        (409, {"success": False, "error": "Exists"}, GenerationConflict, "Exists"),
        (422, {"success": False, "message": "Too strict"}, GenerationInfeasible, "Too strict"),
        (200, {"success": False}, GenerationInfeasible, "Failed to generate assignments"),
        (403, {"success": False, "error": "Only the host"}, AuthorizationDenied, "Only the host"),
        (500, None, PartyStoreError, "Failed to generate assignments"),
    ],
)
def test_generate_error_mapping(
    status: int,
    payload: dict[str, object] | None,
    expected: type[PartyStoreError],
    message: str,
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        if payload is None:
            return httpx.Response(status, content=b"<html>oops</html>")
        return httpx.Response(status, json=payload)

    request = GenerationRequest(
        regenerate=False,
        force_regenerate=False,
        send_emails=True,
        lock_after_generation=False,
        max_attempts=1000,
        seed=1,
    )
    with pytest.raises(expected) as excinfo:
        asyncio.run(_store(handler).generate_assignments("party-1", request))

    assert type(excinfo.value) is expected
    assert excinfo.value.message == message
    assert excinfo.value.status_code == status


def test_not_found_and_transport_errors() -> None:
    def missing(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"success": False, "error": "Party not found"})

    def offline(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PartyNotFound, match="Party not found"):
        asyncio.run(_store(missing).fetch_party("nope"))

    with pytest.raises(StoreUnavailable) as excinfo:
        asyncio.run(_store(offline).fetch_assignments("party-1"))
    assert excinfo.value.status_code is None


def test_unexpected_payload_is_a_store_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_envelope({"party": {"status": "active"}}))

    with pytest.raises(PartyStoreError, match="Unexpected party store response"):
        asyncio.run(_store(handler).fetch_party("party-1"))


def test_exclusion_calls() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "GET":
            return httpx.Response(
                200,
                json=_envelope(
                    [
                        {"id": 1, "participant1_id": 3, "participant2_id": 1},
                        {"id": 2, "participant1Id": 2, "participant2Id": 3},
                    ]
                ),
            )
        if request.method == "POST":
            return httpx.Response(
                201,
                json=_envelope({"id": 5, "participant1_id": 2, "participant2_id": 1}),
            )
        return httpx.Response(200, json={"success": True})

    store = _store(handler)

    async def scenario() -> None:
        records = await store.list_exclusions("party-1")
        assert [(r.first_id, r.second_id) for r in records] == [(1, 3), (2, 3)]
        created = await store.add_exclusion("party-1", 2, 1)
        assert (created.first_id, created.second_id, created.id) == (1, 2, 5)
        await store.remove_exclusion("party-1", 1, 2)

    asyncio.run(scenario())

    assert [r.method for r in requests] == ["GET", "POST", "DELETE"]
    assert all(r.url.path == "/api/parties/party-1/assignments/exclusions" for r in requests)
    assert json.loads(requests[1].content) == {"participant1Id": 2, "participant2Id": 1}
    assert json.loads(requests[2].content) == {"participant1Id": 1, "participant2Id": 2}


def test_delete_assignments_accepts_empty_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        assert request.url.path == "/api/parties/party-1/assignments"
        return httpx.Response(204)

    asyncio.run(_store(handler).delete_assignments("party-1"))


def test_update_party_and_account() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/users/account":
            return httpx.Response(
                200,
                json=_envelope(
                    {
                        "user": {"id": 1, "email": "alice@example.com", "full_name": "Alice A."},
                        "hostedParties": [],
                        "participantParties": [],
                    }
                ),
            )
        assert request.method == "PUT"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_envelope({**PARTY, "status": "completed"}))

    store = _store(handler)
    update = PartyUpdate(host_can_see_all=False, status=PartyStatus.COMPLETED)
    party = asyncio.run(store.update_party("party-1", update))
    user = asyncio.run(store.fetch_current_user())

    assert bodies == [{"hostCanSeeAll": False, "status": "completed"}]
    assert party.status is PartyStatus.COMPLETED
    assert user.id == 1
    assert user.full_name == "Alice A."


def test_error_for_status_outside_generation() -> None:
    assert type(error_for_status(409, "x")) is PartyStoreError
    assert type(error_for_status(422, "x")) is PartyStoreError
    assert type(error_for_status(401, "x")) is AuthorizationDenied


def test_only_successful_envelopes_are_cached() -> None:
    assert _should_cache_payload({"success": True, "data": {}})
    assert not _should_cache_payload({"success": False, "error": "nope"})
    assert not _should_cache_payload(["not", "an", "envelope"])


def test_reads_after_a_mutation_skip_the_cache() -> None:
    seen_cache: list[CacheConfig | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(200, json={"success": True})
        return httpx.Response(200, json=_envelope({"generated": False}))

    mock_factory = _make_client_factory(handler)

    def recording_factory(resilience: ResilienceConfig) -> ResilientClient:
        seen_cache.append(resilience.cache)
        return mock_factory(replace(resilience, cache=None))

    cache = CacheConfig(should_cache=_should_cache_payload)
    config = StoreConfig(
        base_url=BASE_URL,
        resilience=ResilienceConfig(name="party-store-test", base_url=BASE_URL, cache=cache),
    )
    store = PartyStoreClient(config=config, client_factory=recording_factory)

    async def scenario() -> None:
        await store.fetch_assignments("party-1")
        await store.delete_assignments("party-1")
        await store.fetch_assignments("party-1")

    asyncio.run(scenario())

    assert seen_cache == [cache, cache, None]
