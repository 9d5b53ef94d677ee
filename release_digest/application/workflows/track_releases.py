import asyncio
from dataclasses import dataclass

import aiohttp
from tqdm import tqdm

from release_digest.application.ports import (
    CursorStorePort,
    DigestRendererPort,
    DigestSinkPort,
    ReleaseFeedPort,
    RepositoryListerPort,
)
from release_digest.config.logger_config import logger
from release_digest.domain.cursors import ReleaseCursors
from release_digest.domain.models import DigestSummary, Page, RepositoryRecord, ScanOutcome
from release_digest.domain.rules import assemble_page, flatten_releases, pack_pages, select_new_items


@dataclass(frozen=True)
class TrackWorkflowConfig:
    page_max_bytes: int = 2 * 1024 * 1024
    semaphore_limit: int = 5
    connector_limit: int = 0
    connector_limit_per_host: int = 10
    connector_ttl_dns_cache: int = 300
    show_progress: bool = True


class TrackReleasesWorkflow:
    def __init__(
        self,
        lister: RepositoryListerPort,
        feed_client: ReleaseFeedPort,
        cursor_store: CursorStorePort,
        renderer: DigestRendererPort,
        sink: DigestSinkPort,
        config: TrackWorkflowConfig | None = None,
    ) -> None:
        self.lister = lister
        self.feed_client = feed_client
        self.cursor_store = cursor_store
        self.renderer = renderer
        self.sink = sink
        self.config = config or TrackWorkflowConfig()
        self._semaphore = asyncio.Semaphore(self.config.semaphore_limit)

    async def run(self) -> DigestSummary:
        connector = aiohttp.TCPConnector(
            limit=self.config.connector_limit,
            limit_per_host=self.config.connector_limit_per_host,
            ttl_dns_cache=self.config.connector_ttl_dns_cache,
        )
        async with aiohttp.ClientSession(connector=connector) as session:
            # A listing failure propagates before any cursor is loaded or saved.
            repositories = await self.lister.list_starred(session)
            cursors = self.cursor_store.load()
            try:
                outcomes = await self._scan_all(session, repositories, cursors)
                for outcome in outcomes:
                    if outcome.ok:
                        cursors.advance(outcome.repository.full_name, outcome.items)

                releases = flatten_releases(outcomes)
                pages = pack_pages(releases, self.config.page_max_bytes)
                logger.info("Got pages to send: {} (releases: {})", len(pages), len(releases))

                pages_delivered = 0
                for page_number, page in enumerate(pages, start=1):
                    if await self._deliver_page(page, page_number, len(pages)):
                        pages_delivered += 1
            finally:
                cursors_persisted = self.cursor_store.save(cursors)

        scanned_ok = sum(1 for outcome in outcomes if outcome.ok)
        summary = DigestSummary(
            repositories_total=len(repositories),
            scanned_ok=scanned_ok,
            scan_failed=len(outcomes) - scanned_ok,
            releases_total=len(releases),
            pages_total=len(pages),
            pages_delivered=pages_delivered,
            pages_failed=len(pages) - pages_delivered,
            cursors_updated=len(cursors.updated),
            cursors_persisted=cursors_persisted,
        )
        logger.info(
            "Release digest completed: repositories={}, scan_failed={}, releases={}, pages={}, pages_failed={}, cursors_updated={}",
            summary.repositories_total,
            summary.scan_failed,
            summary.releases_total,
            summary.pages_total,
            summary.pages_failed,
            summary.cursors_updated,
        )
        return summary

    async def _scan_all(
        self,
        session: aiohttp.ClientSession,
        repositories: list[RepositoryRecord],
        cursors: ReleaseCursors,
    ) -> list[ScanOutcome]:
        with tqdm(
            total=len(repositories),
            desc="Release feeds",
            unit="repo",
            leave=True,
            disable=not self.config.show_progress,
        ) as progress:

            async def _tracked(repository: RepositoryRecord) -> ScanOutcome:
                outcome = await self._scan_repository(session, repository, cursors.get(repository.full_name))
                progress.update(1)
                return outcome

            # gather keeps repository order, so flattening stays deterministic.
            return list(await asyncio.gather(*(_tracked(repo) for repo in repositories)))

    async def _scan_repository(
        self,
        session: aiohttp.ClientSession,
        repository: RepositoryRecord,
        cursor_guid: str,
    ) -> ScanOutcome:
        async with self._semaphore:
            logger.debug("Reading releases for {}...", repository.full_name)
            try:
                feed = await self.feed_client.fetch_releases(session, repository)
            except Exception as exc:
                logger.error(
                    "Unable to read releases for {} ({}): {}",
                    repository.full_name,
                    type(exc).__name__,
                    exc,
                )
                return ScanOutcome(repository=repository, error=f"{type(exc).__name__}:{exc}")

        new_items = select_new_items(feed, cursor_guid)
        if new_items:
            logger.info("Read releases for {}: {}", repository.full_name, len(new_items))
        return ScanOutcome(repository=repository, items=tuple(new_items))

    async def _deliver_page(self, page: Page, page_number: int, page_count: int) -> bool:
        try:
            groups = assemble_page(page)
            document = self.renderer.render(groups, page_number, page_count)
            await self.sink.deliver(document, page_number, page_count)
            return True
        except Exception as exc:
            logger.exception(
                "Failed delivering page {}/{} ({} releases, {} bytes) with error type {}: {}",
                page_number,
                page_count,
                len(page),
                page.size,
                type(exc).__name__,
                exc,
            )
            return False
