"""Infrastructure adapters for release tracking."""

from release_digest.infrastructure.cursor_store import JsonCursorStore
from release_digest.infrastructure.feed_client import ReleaseFeedClient, parse_atom_feed
from release_digest.infrastructure.github_client import GitHubStarsClient
from release_digest.infrastructure.renderer import HtmlDigestRenderer
from release_digest.infrastructure.sinks.file_sink import HtmlFileDigestSink
from release_digest.infrastructure.sinks.mail_sink import SmtpDigestSink

__all__ = [
    "GitHubStarsClient",
    "HtmlDigestRenderer",
    "HtmlFileDigestSink",
    "JsonCursorStore",
    "parse_atom_feed",
    "ReleaseFeedClient",
    "SmtpDigestSink",
]
