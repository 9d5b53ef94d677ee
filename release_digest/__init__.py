"""Release digest for starred GitHub repositories."""

from release_digest.digest import run_digest, run_digest_async
from release_digest.domain.models import DigestSummary

__all__ = [
    "DigestSummary",
    "run_digest",
    "run_digest_async",
]
