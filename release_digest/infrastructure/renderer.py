import html
from typing import Sequence

from release_digest.application.ports import DigestRendererPort
from release_digest.domain.models import ReleaseItem, RepositoryDigestGroup


class HtmlDigestRenderer(DigestRendererPort):
    """Renders one digest page as a standalone HTML document.

    Release bodies come from the feed as HTML and are inserted as-is; every
    other value is escaped.
    """

    title = "New GitHub Releases"

    def render(
        self,
        groups: Sequence[RepositoryDigestGroup],
        page_number: int,
        page_count: int,
    ) -> str:
        heading = self.title if page_count <= 1 else f"{self.title} ({page_number}/{page_count})"
        sections = "\n".join(self._render_group(group) for group in groups)
        return (
            "<!DOCTYPE html>\n"
            "<html>\n<head>\n"
            '<meta charset="utf-8">\n'
            f"<title>{html.escape(heading)}</title>\n"
            "</head>\n<body>\n"
            f"<h1>{html.escape(heading)}</h1>\n"
            f"{sections}\n"
            "</body>\n</html>\n"
        )

    def _render_group(self, group: RepositoryDigestGroup) -> str:
        repo = group.repository
        description = f"<p>{html.escape(repo.description)}</p>\n" if repo.description else ""
        releases = "\n".join(self._render_item(item) for item in group.items)
        return (
            "<section>\n"
            f'<h2><a href="{html.escape(repo.url, quote=True)}">{html.escape(repo.full_name)}</a></h2>\n'
            f"{description}"
            f"<p>&#9733; {repo.stargazers_count} &middot; forks {repo.forks_count}"
            f" &middot; watchers {repo.watchers_count}</p>\n"
            f"{releases}\n"
            "</section>"
        )

    @staticmethod
    def _render_item(item: ReleaseItem) -> str:
        title = html.escape(item.title or item.guid)
        if item.link:
            title = f'<a href="{html.escape(item.link, quote=True)}">{title}</a>'
        published = f" <small>{html.escape(item.published)}</small>" if item.published else ""
        return f"<article>\n<h3>{title}{published}</h3>\n<div>{item.content}</div>\n</article>"
