from collections.abc import Iterable, Sequence

from pathvalidate import sanitize_filename as lib_sanitize

from release_digest.domain.models import (
    Page,
    Release,
    ReleaseItem,
    RepositoryDigestGroup,
    ScanOutcome,
)


def select_new_items(feed: Sequence[ReleaseItem], cursor_guid: str) -> list[ReleaseItem]:
    """Return the newest-first prefix of ``feed`` that precedes ``cursor_guid``.

    When no item matches the cursor (first run, or the release it pointed at
    is gone) the whole feed counts as new.
    """
    new_items: list[ReleaseItem] = []
    for item in feed:
        if cursor_guid and item.guid == cursor_guid:
            break
        new_items.append(item)
    return new_items


def flatten_releases(outcomes: Iterable[ScanOutcome]) -> list[Release]:
    releases: list[Release] = []
    for outcome in outcomes:
        if not outcome.ok:
            continue
        releases.extend(Release(repository=outcome.repository, item=item) for item in outcome.items)
    return releases


def pack_pages(releases: Sequence[Release], max_bytes: int) -> list[Page]:
    """Greedily split ``releases`` into pages of at most ``max_bytes``.

    Input order is kept. A release larger than the budget is never split and
    ends up alone on its own page.
    """
    if max_bytes <= 0:
        raise ValueError(f"max_bytes must be positive, got {max_bytes}")

    pages: list[Page] = []
    current: list[Release] = []
    current_size = 0
    for release in releases:
        if current and current_size + release.size > max_bytes:
            pages.append(Page(releases=tuple(current)))
            current = []
            current_size = 0
        current.append(release)
        current_size += release.size

    if current:
        pages.append(Page(releases=tuple(current)))
    return pages


def assemble_page(page: Page) -> list[RepositoryDigestGroup]:
    grouped: dict[str, list[Release]] = {}
    for release in page.releases:
        grouped.setdefault(release.repository.full_name, []).append(release)

    return [
        RepositoryDigestGroup(
            repository=releases[0].repository,
            items=tuple(release.item for release in releases),
        )
        for _, releases in sorted(grouped.items())
    ]


def build_feed_url(repository_url: str) -> str:
    return f"{repository_url.rstrip('/')}/releases.atom"


def make_digest_filename(run_id: str, page_number: int) -> str:
    safe_run_id = lib_sanitize(run_id, replacement_text="_") or "digest"
    return f"{safe_run_id}_page_{page_number}.html"
