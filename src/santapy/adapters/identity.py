"""Identity providers: who is the current viewer."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from santapy.domain.errors import AuthorizationDenied, PartyStoreError
from santapy.domain.model import AnonymousViewer, AuthenticatedViewer
from santapy.domain.ports import IdentityProvider

if TYPE_CHECKING:
    from santapy.domain.model import SessionUser, ViewerContext
    from santapy.domain.ports import PartyStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StaticIdentity:
    """Always report the same viewer."""

    viewer: ViewerContext = field(default_factory=AnonymousViewer)

    async def current_viewer(self) -> ViewerContext:
        return self.viewer


@dataclass(slots=True)
class StoreSessionIdentity:
    """Ask the store's account endpoint who the session belongs to.

    Without a session token, or when the store turns the session down, the
    viewer is anonymous. The answer is cached for the lifetime of the object.
    """

    store: PartyStore
    has_session: bool = True
    _user: SessionUser | None = None
    _resolved: bool = False

    async def current_viewer(self) -> ViewerContext:
        user = await self._session_user()
        if user is None:
            return AnonymousViewer()
        return AuthenticatedViewer(user)

    async def _session_user(self) -> SessionUser | None:
        if self._resolved:
            return self._user
        if self.has_session:
            try:
                self._user = await self.store.fetch_current_user()
            except AuthorizationDenied as exc:
                log.info("Session rejected by party store: %s", exc)
            except PartyStoreError as exc:
                log.warning("Could not load session account, continuing anonymously: %s", exc)
                return None
        self._resolved = True
        return self._user

    def forget(self) -> None:
        self._user = None
        self._resolved = False


if TYPE_CHECKING:
    _static_check: IdentityProvider = StaticIdentity()
