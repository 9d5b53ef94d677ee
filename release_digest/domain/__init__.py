"""Domain models and deterministic rules for release tracking."""

from release_digest.domain.cursors import ReleaseCursors
from release_digest.domain.models import (
    DigestSummary,
    Page,
    Release,
    ReleaseItem,
    RepositoryDigestGroup,
    RepositoryRecord,
    ScanOutcome,
)
from release_digest.domain.rules import (
    assemble_page,
    build_feed_url,
    flatten_releases,
    make_digest_filename,
    pack_pages,
    select_new_items,
)

__all__ = [
    "assemble_page",
    "build_feed_url",
    "DigestSummary",
    "flatten_releases",
    "make_digest_filename",
    "pack_pages",
    "Page",
    "Release",
    "ReleaseCursors",
    "ReleaseItem",
    "RepositoryDigestGroup",
    "RepositoryRecord",
    "ScanOutcome",
    "select_new_items",
]
