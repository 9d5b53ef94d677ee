import unittest

from release_digest.domain.models import Page, ReleaseItem, ScanOutcome
from release_digest.domain.rules import (
    assemble_page,
    build_feed_url,
    flatten_releases,
    make_digest_filename,
    pack_pages,
    select_new_items,
)
from tests.utils.factories import make_item, make_release, make_repo


def sizes(pages: list[Page]) -> list[list[int]]:
    return [[release.size for release in page.releases] for page in pages]


class SelectNewItemsTests(unittest.TestCase):
    def setUp(self):
        self.feed = [make_item("A"), make_item("B"), make_item("C"), make_item("D")]

    def test_returns_items_newer_than_cursor(self):
        result = select_new_items(self.feed, "C")
        self.assertEqual([item.guid for item in result], ["A", "B"])

    def test_cursor_on_newest_item_yields_nothing(self):
        self.assertEqual(select_new_items(self.feed, "A"), [])

    def test_stale_cursor_returns_whole_feed(self):
        result = select_new_items(self.feed, "deleted-release")
        self.assertEqual([item.guid for item in result], ["A", "B", "C", "D"])

    def test_empty_cursor_returns_whole_feed(self):
        self.assertEqual(len(select_new_items(self.feed, "")), 4)

    def test_empty_feed(self):
        self.assertEqual(select_new_items([], "A"), [])

    def test_second_scan_with_advanced_cursor_is_empty(self):
        first = select_new_items(self.feed, "")
        second = select_new_items(self.feed, first[0].guid)
        self.assertEqual(second, [])


class PackPagesTests(unittest.TestCase):
    def setUp(self):
        self.repo = make_repo("owner/repo")

    def releases(self, *item_sizes: int):
        return [make_release(self.repo, f"r{i}", size) for i, size in enumerate(item_sizes)]

    def test_closes_page_when_next_item_would_overflow(self):
        pages = pack_pages(self.releases(3, 4, 5), 7)
        self.assertEqual(sizes(pages), [[3, 4], [5]])

    def test_exact_fit_stays_on_one_page(self):
        pages = pack_pages(self.releases(3, 4), 7)
        self.assertEqual(sizes(pages), [[3, 4]])
        self.assertEqual(pages[0].size, 7)

    def test_oversized_release_gets_its_own_page(self):
        pages = pack_pages(self.releases(20), 7)
        self.assertEqual(sizes(pages), [[20]])

    def test_oversized_release_between_small_ones(self):
        pages = pack_pages(self.releases(2, 20, 2, 3), 7)
        self.assertEqual(sizes(pages), [[2], [20], [2, 3]])

    def test_empty_input_yields_no_pages(self):
        self.assertEqual(pack_pages([], 7), [])

    def test_preserves_input_order(self):
        releases = self.releases(1, 1, 1, 1, 1)
        pages = pack_pages(releases, 2)
        flattened = [release for page in pages for release in page.releases]
        self.assertEqual(flattened, releases)

    def test_rejects_non_positive_budget(self):
        with self.assertRaises(ValueError):
            pack_pages(self.releases(1), 0)

    def test_size_counts_utf8_bytes(self):
        item = ReleaseItem(guid="g", title="", link="", published="", content="é")
        self.assertEqual(item.size, 2)


class FlattenAndAssembleTests(unittest.TestCase):
    def test_flatten_keeps_repository_then_release_order_and_skips_failures(self):
        alpha = make_repo("a/alpha")
        beta = make_repo("b/beta")
        gamma = make_repo("c/gamma")
        outcomes = [
            ScanOutcome(repository=alpha, items=(make_item("a2"), make_item("a1"))),
            ScanOutcome(repository=beta, error="ReleaseFeedError:boom"),
            ScanOutcome(repository=gamma, items=(make_item("c1"),)),
        ]

        releases = flatten_releases(outcomes)
        self.assertEqual([r.item.guid for r in releases], ["a2", "a1", "c1"])
        self.assertIs(releases[0].repository, alpha)
        self.assertIs(releases[1].repository, alpha)

    def test_assemble_groups_by_repository_sorted_by_full_name(self):
        zeta = make_repo("z/zeta")
        alpha = make_repo("a/alpha")
        page = Page(
            releases=(
                make_release(zeta, "z2", 1),
                make_release(alpha, "a1", 1),
                make_release(zeta, "z1", 1),
            )
        )

        groups = assemble_page(page)
        self.assertEqual([g.repository.full_name for g in groups], ["a/alpha", "z/zeta"])
        self.assertEqual([item.guid for item in groups[1].items], ["z2", "z1"])

    def test_assemble_empty_page(self):
        self.assertEqual(assemble_page(Page(releases=())), [])


class UrlAndFilenameRuleTests(unittest.TestCase):
    def test_build_feed_url(self):
        self.assertEqual(
            build_feed_url("https://github.com/owner/repo/"),
            "https://github.com/owner/repo/releases.atom",
        )

    def test_make_digest_filename_sanitizes_run_id(self):
        self.assertEqual(make_digest_filename("run:1/2", 3), "run_1_2_page_3.html")
