import asyncio
import unittest

from release_digest.domain.errors import ReleaseFeedError
from release_digest.infrastructure.feed_client import ReleaseFeedClient, parse_atom_feed
from tests.utils.factories import make_repo
from tests.utils.fake_http import FakeResponse, FakeSession, RaisingResponse

ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:media="http://search.yahoo.com/mrss/" xml:lang="en-US">
  <id>tag:github.com,2008:https://github.com/owner/repo/releases</id>
  <link type="text/html" rel="alternate" href="https://github.com/owner/repo/releases"/>
  <title>Release notes from repo</title>
  <updated>2024-03-02T10:00:00Z</updated>
  <entry>
    <id>tag:github.com,2008:Repository/1/v2.0.0</id>
    <updated>2024-03-02T10:00:00Z</updated>
    <link rel="alternate" type="text/html" href="https://github.com/owner/repo/releases/tag/v2.0.0"/>
    <title>v2.0.0</title>
    <content type="html">&lt;p&gt;Breaking &amp;amp; shiny&lt;/p&gt;</content>
    <author><name>octocat</name></author>
    <media:thumbnail height="30" width="30" url="https://avatars.githubusercontent.com/u/1?s=60&amp;v=4"/>
  </entry>
  <entry>
    <id>tag:github.com,2008:Repository/1/v1.0.0</id>
    <updated>2024-01-01T10:00:00Z</updated>
    <link rel="alternate" type="text/html" href="https://github.com/owner/repo/releases/tag/v1.0.0"/>
    <title>v1.0.0</title>
    <content type="html">&lt;p&gt;First&lt;/p&gt;</content>
  </entry>
</feed>
"""


class ParseAtomFeedTests(unittest.TestCase):
    def test_parses_entries_in_document_order(self):
        items = parse_atom_feed(ATOM_FEED, "owner/repo")

        self.assertEqual(
            [item.guid for item in items],
            ["tag:github.com,2008:Repository/1/v2.0.0", "tag:github.com,2008:Repository/1/v1.0.0"],
        )
        newest = items[0]
        self.assertEqual(newest.title, "v2.0.0")
        self.assertEqual(newest.link, "https://github.com/owner/repo/releases/tag/v2.0.0")
        self.assertEqual(newest.published, "2024-03-02T10:00:00Z")
        self.assertEqual(newest.content, "<p>Breaking &amp; shiny</p>")

    def test_content_whitespace_is_kept_for_sizing(self):
        document = (
            '<feed xmlns="http://www.w3.org/2005/Atom"><entry>'
            "<id> tag:1 </id><title> v1 </title>"
            '<content type="html">\n  &lt;p&gt;x&lt;/p&gt;\n</content>'
            "</entry></feed>"
        )
        item = parse_atom_feed(document, "owner/repo")[0]

        self.assertEqual(item.guid, "tag:1")
        self.assertEqual(item.title, "v1")
        self.assertEqual(item.content, "\n  <p>x</p>\n")
        self.assertEqual(item.size, len("\n  <p>x</p>\n".encode("utf-8")))

    def test_xhtml_content_keeps_markup(self):
        document = (
            '<feed xmlns="http://www.w3.org/2005/Atom"><entry><id>tag:1</id>'
            '<content type="xhtml"><div xmlns="http://www.w3.org/1999/xhtml">'
            "<p>Hi <b>there</b></p></div></content>"
            "</entry></feed>"
        )
        item = parse_atom_feed(document, "owner/repo")[0]

        self.assertIn("<p>Hi <b>there</b></p>", item.content)

    def test_feed_without_entries_is_empty(self):
        document = '<feed xmlns="http://www.w3.org/2005/Atom"><title>none</title></feed>'
        self.assertEqual(parse_atom_feed(document, "owner/repo"), [])

    def test_non_feed_document_raises(self):
        with self.assertRaises(ReleaseFeedError):
            parse_atom_feed("<html><body>rate limited</body></html>", "owner/repo")


class ReleaseFeedClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_fetches_repository_feed(self):
        session = FakeSession([FakeResponse(status=200, text_data=ATOM_FEED)])
        client = ReleaseFeedClient(timeout_seconds=1)

        items = await client.fetch_releases(session, make_repo("owner/repo"))

        self.assertEqual(len(items), 2)
        self.assertEqual(session.calls[0][0], "https://github.com/owner/repo/releases.atom")

    async def test_non_200_raises_feed_error(self):
        session = FakeSession([FakeResponse(status=404, text_data="Not Found")])
        with self.assertRaises(ReleaseFeedError) as ctx:
            await ReleaseFeedClient().fetch_releases(session, make_repo("owner/repo"))
        self.assertEqual(ctx.exception.full_name, "owner/repo")

    async def test_timeout_raises_feed_error(self):
        session = FakeSession([RaisingResponse(asyncio.TimeoutError())])
        with self.assertRaises(ReleaseFeedError):
            await ReleaseFeedClient().fetch_releases(session, make_repo("owner/repo"))
