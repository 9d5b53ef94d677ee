import asyncio

import aiohttp
from aiohttp import ClientError
from bs4 import BeautifulSoup

from release_digest.application.ports import ReleaseFeedPort
from release_digest.config.logger_config import logger
from release_digest.domain.errors import ReleaseFeedError
from release_digest.domain.models import ReleaseItem, RepositoryRecord
from release_digest.domain.rules import build_feed_url


class ReleaseFeedClient(ReleaseFeedPort):
    """Reads a repository's ``releases.atom`` feed."""

    def __init__(self, timeout_seconds: float = 15.0) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch_releases(
        self, session: aiohttp.ClientSession, repository: RepositoryRecord
    ) -> list[ReleaseItem]:
        if not repository.url:
            raise ReleaseFeedError(repository.full_name, "repository has no html_url")

        url = build_feed_url(repository.url)
        headers = {"User-Agent": "starred-release-digest", "Accept": "application/atom+xml"}
        try:
            async with session.get(url, headers=headers, timeout=self.timeout) as resp:
                if resp.status != 200:
                    raise ReleaseFeedError(repository.full_name, f"HTTP {resp.status} for {url}")
                body = await resp.text()
        except (ClientError, asyncio.TimeoutError) as exc:
            raise ReleaseFeedError(repository.full_name, f"{type(exc).__name__}: {exc}") from exc

        items = parse_atom_feed(body, repository.full_name)
        logger.debug("Feed {} returned {} entries", url, len(items))
        return items


def parse_atom_feed(document: str, full_name: str = "") -> list[ReleaseItem]:
    """Parse an Atom document into release items in document order."""
    soup = BeautifulSoup(document, "xml")
    if soup.find("feed") is None:
        raise ReleaseFeedError(full_name, "document is not an Atom feed")

    items: list[ReleaseItem] = []
    for entry in soup.find_all("entry"):
        guid = _text(entry, "id")
        if not guid:
            logger.warning("Skip feed entry without id: repository={}", full_name)
            continue
        link_tag = entry.find("link")
        items.append(
            ReleaseItem(
                guid=guid,
                title=_text(entry, "title"),
                link=str(link_tag.get("href", "")) if link_tag is not None else "",
                published=_text(entry, "published") or _text(entry, "updated"),
                content=_content(entry),
            )
        )
    return items


def _text(entry, name: str) -> str:
    tag = entry.find(name, recursive=False)
    if tag is None:
        return ""
    return tag.get_text().strip()


def _content(entry) -> str:
    # Body kept byte-for-byte; its length drives page packing.
    for name in ("content", "summary"):
        tag = entry.find(name, recursive=False)
        if tag is None:
            continue
        if tag.get("type") == "xhtml":
            body = tag.decode_contents()
        else:
            body = tag.get_text()
        if body:
            return body
    return ""
