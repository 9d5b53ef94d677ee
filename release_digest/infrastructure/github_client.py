import asyncio
import json
from typing import Any

import aiohttp
from aiohttp import ClientError, ContentTypeError

from release_digest.application.ports import RepositoryListerPort
from release_digest.config.logger_config import logger
from release_digest.domain.errors import RepositoryListingError
from release_digest.domain.models import RepositoryRecord

PER_PAGE = 100


class GitHubStarsClient(RepositoryListerPort):
    def __init__(
        self,
        username: str,
        token: str = "",
        base_url: str = "https://api.github.com",
        timeout_seconds: float = 15.0,
    ) -> None:
        self.username = username
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "starred-release-digest",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def list_starred(self, session: aiohttp.ClientSession) -> list[RepositoryRecord]:
        url = f"{self.base_url}/users/{self.username}/starred"
        repositories: list[RepositoryRecord] = []
        page = 1

        while True:
            logger.info("Reading stars page {}...", page)
            payload = await self._fetch_page(session, url, page)
            if not payload:
                break
            for entry in payload:
                try:
                    repositories.append(RepositoryRecord.from_api(entry))
                except (KeyError, TypeError, ValueError, AttributeError) as exc:
                    raise RepositoryListingError(
                        f"Malformed repository entry on page {page}: {type(exc).__name__}: {exc}"
                    ) from exc
            page += 1

        repositories.sort(key=lambda repo: repo.full_name)
        logger.info("Starred repositories for {}: {}", self.username, len(repositories))
        return repositories

    async def _fetch_page(self, session: aiohttp.ClientSession, url: str, page: int) -> list[Any]:
        params = {"per_page": str(PER_PAGE), "page": str(page)}
        try:
            async with session.get(url, params=params, headers=self.headers, timeout=self.timeout) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise RepositoryListingError(f"Bad response status {resp.status} for stars page {page}: {body[:200]}")
                try:
                    data = await resp.json()
                except (ContentTypeError, json.JSONDecodeError, ValueError) as exc:
                    raise RepositoryListingError(f"Unable to parse stars page {page}: {exc}") from exc
        except (ClientError, asyncio.TimeoutError) as exc:
            raise RepositoryListingError(f"Unable to request stars page {page}: {type(exc).__name__}: {exc}") from exc

        if not isinstance(data, list):
            raise RepositoryListingError(f"Stars page {page} is not a JSON array")
        return data
