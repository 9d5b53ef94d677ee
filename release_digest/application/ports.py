from typing import Protocol, Sequence, runtime_checkable

import aiohttp

from release_digest.domain.cursors import ReleaseCursors
from release_digest.domain.models import ReleaseItem, RepositoryDigestGroup, RepositoryRecord


@runtime_checkable
class RepositoryListerPort(Protocol):
    async def list_starred(self, session: aiohttp.ClientSession) -> list[RepositoryRecord]: ...
    """Return every starred repository sorted by full name, or raise."""


@runtime_checkable
class ReleaseFeedPort(Protocol):
    async def fetch_releases(
        self, session: aiohttp.ClientSession, repository: RepositoryRecord
    ) -> list[ReleaseItem]: ...
    """Return the repository's releases, newest first."""


@runtime_checkable
class CursorStorePort(Protocol):
    def load(self) -> ReleaseCursors: ...

    def save(self, cursors: ReleaseCursors) -> bool: ...


@runtime_checkable
class DigestRendererPort(Protocol):
    def render(
        self,
        groups: Sequence[RepositoryDigestGroup],
        page_number: int,
        page_count: int,
    ) -> str: ...


@runtime_checkable
class DigestSinkPort(Protocol):
    async def deliver(self, document: str, page_number: int, page_count: int) -> None: ...
    """Deliver one rendered page; raise DigestDeliveryError on failure."""
