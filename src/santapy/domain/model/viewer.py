"""Who is looking at a party.

A viewer is derived per request: either a signed-in session user or an
anonymous visitor holding a participant access token, never both.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionUser:
    id: int
    email: str
    full_name: str | None = None


@dataclass(frozen=True, slots=True)
class AuthenticatedViewer:
    user: SessionUser

    @property
    def is_authenticated(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class AnonymousViewer:
    access_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return False


type ViewerContext = AuthenticatedViewer | AnonymousViewer
