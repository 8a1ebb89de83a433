"""Port for the session/identity provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from santapy.domain.model import ViewerContext


@runtime_checkable
class IdentityProvider(Protocol):
    """Expose the viewer of the current request."""

    async def current_viewer(self) -> ViewerContext: ...


__all__ = ["IdentityProvider"]
