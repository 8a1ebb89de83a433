"""HTTP client for the remote party store."""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, cast
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from santapy.adapters.http_resilience import ResilientClient
from santapy.config import get_store_config
from santapy.domain.errors import (
    AuthorizationDenied,
    GenerationConflict,
    GenerationInfeasible,
    PartyNotFound,
    PartyStoreError,
    StoreUnavailable,
)
from santapy.domain.ports import PartyStore

from .schema import (
    AccountPayload,
    AssignmentsPayload,
    Envelope,
    ExclusionPayload,
    GenerationSummaryPayload,
    PartyDetailsPayload,
    PartyPayload,
)
from .translator import (
    parse_exclusion,
    parse_generation_summary,
    parse_party,
    parse_remote_assignments,
    parse_session_user,
    parse_snapshot,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from santapy.config import ResilienceConfig, StoreConfig
    from santapy.domain.model import (
        Exclusion,
        ParticipantId,
        Party,
        PartyId,
        PartySnapshot,
        SessionUser,
    )
    from santapy.domain.ports import (
        GenerationRequest,
        GenerationSummary,
        PartyUpdate,
        RemoteAssignments,
    )

log = getLogger(__name__)

_AUTH_STATUSES = frozenset({401, 403})
_INFEASIBLE_STATUSES = frozenset({400, 422})


def _should_cache_payload(payload: object) -> bool:
    try:
        return Envelope.model_validate(payload).success
    except ValidationError:
        return False


def _default_store_config() -> StoreConfig:
    return get_store_config(cache_predicate=_should_cache_payload)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _party_path(party_id: PartyId, *parts: str) -> str:
    return "/".join(("parties", quote(party_id, safe=""), *parts))


def error_for_status(
    status_code: int | None, message: str, *, generation: bool = False
) -> PartyStoreError:
    """Map a failed store response onto the domain error taxonomy."""

    if status_code in _AUTH_STATUSES:
        return AuthorizationDenied(message, status_code=status_code)
    if status_code == 404:
        return PartyNotFound(message, status_code=status_code)
    if generation and status_code == 409:
        return GenerationConflict(message, status_code=status_code)
    if generation and (
        status_code in _INFEASIBLE_STATUSES or (status_code is not None and status_code < 300)
    ):
        return GenerationInfeasible(message, status_code=status_code)
    return PartyStoreError(message, status_code=status_code)


@contextmanager
def _payload_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (ValidationError, ValueError) as exc:
        log.error(f"Unexpected party store payload while trying to {operation}: {exc}")
        msg = f"Unexpected party store response while trying to {operation}"
        raise PartyStoreError(msg) from exc


def _unwrap_list(data: object, key: str) -> list[object]:
    if isinstance(data, Mapping) and key in data:
        data = cast(Mapping[str, object], data)[key]
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"expected a list of {key}")
    return cast(list[object], data)


@dataclass(slots=True)
class PartyStoreClient:
    """``PartyStore`` backed by the store's JSON API."""

    config: StoreConfig = field(default_factory=_default_store_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    # once this client has changed remote state, cached reads may be outdated
    _bypass_cache: bool = field(default=False, init=False)

    async def fetch_party(self, party_id: PartyId) -> PartySnapshot:
        data = await self._perform("GET", _party_path(party_id), operation="load party")
        with _payload_errors("load party"):
            return parse_snapshot(PartyDetailsPayload.model_validate(data))

    async def fetch_party_by_token(self, access_token: str) -> PartySnapshot:
        data = await self._perform(
            "GET",
            "parties/by-token",
            operation="load party",
            params={"token": access_token},
        )
        with _payload_errors("load party"):
            return parse_snapshot(PartyDetailsPayload.model_validate(data))

    async def fetch_assignments(self, party_id: PartyId) -> RemoteAssignments:
        data = await self._perform(
            "GET", _party_path(party_id, "assignments"), operation="get assignments"
        )
        with _payload_errors("get assignments"):
            return parse_remote_assignments(
                AssignmentsPayload.model_validate(data), party_id=party_id
            )

    async def fetch_assignments_by_token(
        self, party_id: PartyId, access_token: str
    ) -> RemoteAssignments:
        data = await self._perform(
            "GET",
            _party_path(party_id, "assignments", "public"),
            operation="get assignments",
            params={"token": access_token},
        )
        with _payload_errors("get assignments"):
            return parse_remote_assignments(
                AssignmentsPayload.model_validate(data), party_id=party_id
            )

    async def generate_assignments(
        self, party_id: PartyId, request: GenerationRequest
    ) -> GenerationSummary:
        body = {
            "regenerate": request.regenerate,
            "forceRegenerate": request.force_regenerate,
            "sendEmails": request.send_emails,
            "lockAfterGeneration": request.lock_after_generation,
            "maxAttempts": request.max_attempts,
            "seed": request.seed,
        }
        data = await self._perform(
            "POST",
            _party_path(party_id, "assignments", "generate"),
            operation="generate assignments",
            json=body,
            generation=True,
        )
        self._bypass_cache = True
        with _payload_errors("generate assignments"):
            return parse_generation_summary(
                GenerationSummaryPayload.model_validate(data or {}), party_id=party_id
            )

    async def delete_assignments(self, party_id: PartyId) -> None:
        await self._perform(
            "DELETE", _party_path(party_id, "assignments"), operation="delete assignments"
        )
        self._bypass_cache = True

    async def list_exclusions(self, party_id: PartyId) -> list[Exclusion]:
        data = await self._perform(
            "GET",
            _party_path(party_id, "assignments", "exclusions"),
            operation="get exclusions",
        )
        with _payload_errors("get exclusions"):
            return [
                parse_exclusion(ExclusionPayload.model_validate(item), party_id=party_id)
                for item in _unwrap_list(data, "exclusions")
            ]

    async def add_exclusion(
        self, party_id: PartyId, participant1_id: ParticipantId, participant2_id: ParticipantId
    ) -> Exclusion:
        body = {"participant1Id": participant1_id, "participant2Id": participant2_id}
        data = await self._perform(
            "POST",
            _party_path(party_id, "assignments", "exclusions"),
            operation="add exclusion",
            json=body,
        )
        self._bypass_cache = True
        with _payload_errors("add exclusion"):
            payload = ExclusionPayload.model_validate(data if data is not None else body)
            return parse_exclusion(payload, party_id=party_id)

    async def remove_exclusion(
        self, party_id: PartyId, participant1_id: ParticipantId, participant2_id: ParticipantId
    ) -> None:
        await self._perform(
            "DELETE",
            _party_path(party_id, "assignments", "exclusions"),
            operation="remove exclusion",
            json={"participant1Id": participant1_id, "participant2Id": participant2_id},
        )
        self._bypass_cache = True

    async def update_party(self, party_id: PartyId, update: PartyUpdate) -> Party:
        body: dict[str, object] = {}
        if update.host_can_see_all is not None:
            body["hostCanSeeAll"] = update.host_can_see_all
        if update.status is not None:
            body["status"] = str(update.status)
        data = await self._perform(
            "PUT", _party_path(party_id), operation="update party", json=body
        )
        self._bypass_cache = True
        with _payload_errors("update party"):
            if isinstance(data, Mapping) and "party" in data:
                data = cast(Mapping[str, object], data)["party"]
            return parse_party(PartyPayload.model_validate(data))

    async def fetch_current_user(self) -> SessionUser:
        data = await self._perform("GET", "users/account", operation="get account")
        with _payload_errors("get account"):
            return parse_session_user(AccountPayload.model_validate(data))

    async def _perform(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: dict[str, str] | None = None,
        json: object = None,
        generation: bool = False,
    ) -> object:
        resilience = self.config.resilience
        if self._bypass_cache and method == "GET" and resilience.cache is not None:
            resilience = replace(resilience, cache=None)
        async with self.client_factory(resilience) as client:
            try:
                response = await client.request(method, path, params=params, json=json)
            except httpx.HTTPError as exc:
                log.error(f"Party store unreachable while trying to {operation}: {exc}")
                raise StoreUnavailable(f"Failed to {operation}: {exc}") from exc

        envelope = _read_envelope(response)
        if response.is_success and envelope.success:
            return envelope.data

        message = envelope.failure_message(operation)
        log.error(f"Party store API error {response.status_code}: {message}")
        raise error_for_status(response.status_code, message, generation=generation) from None


def _read_envelope(response: httpx.Response) -> Envelope:
    if not response.content:
        return Envelope(success=response.is_success)
    try:
        payload = response.json()
    except ValueError:
        return Envelope(success=False)
    if not isinstance(payload, Mapping):
        return Envelope(success=False)
    try:
        return Envelope.model_validate(payload)
    except ValidationError:
        return Envelope(success=False)


if TYPE_CHECKING:
    _store_check: PartyStore = PartyStoreClient()
