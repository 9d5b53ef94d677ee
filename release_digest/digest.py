from __future__ import annotations
import asyncio
from datetime import datetime, timezone
from pathlib import Path

from release_digest.application.ports import DigestSinkPort
from release_digest.application.workflows.track_releases import TrackReleasesWorkflow, TrackWorkflowConfig
from release_digest.config.settings import AppSettings
from release_digest.domain.models import DigestSummary
from release_digest.infrastructure.cursor_store import JsonCursorStore
from release_digest.infrastructure.feed_client import ReleaseFeedClient
from release_digest.infrastructure.github_client import GitHubStarsClient
from release_digest.infrastructure.renderer import HtmlDigestRenderer
from release_digest.infrastructure.sinks.file_sink import HtmlFileDigestSink
from release_digest.infrastructure.sinks.mail_sink import SmtpDigestSink


async def run_digest_async(
    settings: AppSettings,
    *,
    sink: DigestSinkPort | None = None,
    output_dir: str | Path | None = None,
    show_progress: bool = True,
) -> DigestSummary:
    if sink is None:
        if output_dir is not None:
            sink = HtmlFileDigestSink(output_dir, run_id=_build_run_id())
        else:
            sink = SmtpDigestSink.from_settings(settings)

    workflow = TrackReleasesWorkflow(
        lister=GitHubStarsClient(
            username=settings.username,
            token=settings.token,
            base_url=settings.api_base_url,
            timeout_seconds=settings.request_timeout,
        ),
        feed_client=ReleaseFeedClient(timeout_seconds=settings.request_timeout),
        cursor_store=JsonCursorStore(settings.cursor_path),
        renderer=HtmlDigestRenderer(),
        sink=sink,
        config=TrackWorkflowConfig(
            page_max_bytes=settings.page_max_bytes,
            semaphore_limit=settings.scan_concurrency,
            show_progress=show_progress,
        ),
    )
    return await workflow.run()


def run_digest(
    settings: AppSettings,
    *,
    sink: DigestSinkPort | None = None,
    output_dir: str | Path | None = None,
    show_progress: bool = True,
) -> DigestSummary:
    return asyncio.run(
        run_digest_async(
            settings,
            sink=sink,
            output_dir=output_dir,
            show_progress=show_progress,
        )
    )


def _build_run_id() -> str:
    return datetime.now(timezone.utc).strftime("releases_%Y%m%dT%H%M%SZ")
