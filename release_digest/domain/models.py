from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RepositoryRecord:
    name: str
    full_name: str
    description: str
    url: str
    forks_count: int = 0
    stargazers_count: int = 0
    watchers_count: int = 0

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RepositoryRecord":
        return cls(
            name=str(payload.get("name") or ""),
            full_name=str(payload["full_name"]),
            description=str(payload.get("description") or ""),
            url=str(payload.get("html_url") or ""),
            forks_count=int(payload.get("forks_count") or 0),
            stargazers_count=int(payload.get("stargazers_count") or 0),
            watchers_count=int(payload.get("watchers_count") or 0),
        )


@dataclass(frozen=True)
class ReleaseItem:
    guid: str
    title: str
    link: str
    published: str
    content: str

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass(frozen=True)
class Release:
    repository: RepositoryRecord
    item: ReleaseItem
    size: int = field(init=False)

    def __post_init__(self) -> None:
        # Computed once; the packer reads it for every comparison.
        object.__setattr__(self, "size", self.item.size)


@dataclass(frozen=True)
class Page:
    releases: tuple[Release, ...]

    @property
    def size(self) -> int:
        return sum(release.size for release in self.releases)

    def __len__(self) -> int:
        return len(self.releases)


@dataclass(frozen=True)
class RepositoryDigestGroup:
    repository: RepositoryRecord
    items: tuple[ReleaseItem, ...]


@dataclass(frozen=True)
class ScanOutcome:
    repository: RepositoryRecord
    items: tuple[ReleaseItem, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DigestSummary:
    repositories_total: int
    scanned_ok: int
    scan_failed: int
    releases_total: int
    pages_total: int
    pages_delivered: int
    pages_failed: int
    cursors_updated: int
    cursors_persisted: bool
