from collections.abc import Mapping, Sequence

from release_digest.domain.models import ReleaseItem


class ReleaseCursors:
    """Last seen release GUID per repository full name.

    Loaded once at the start of a run, advanced in memory while scanning and
    written back once at the end.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._cursors: dict[str, str] = dict(initial or {})
        self.updated: set[str] = set()

    def get(self, full_name: str) -> str:
        return self._cursors.get(full_name, "")

    def advance(self, full_name: str, new_items: Sequence[ReleaseItem]) -> bool:
        """Point the cursor at the newest of ``new_items``; no-op when empty."""
        if not new_items:
            return False
        newest = new_items[0].guid
        if self._cursors.get(full_name) == newest:
            return False
        self._cursors[full_name] = newest
        self.updated.add(full_name)
        return True

    def to_dict(self) -> dict[str, str]:
        return dict(sorted(self._cursors.items()))

    def __len__(self) -> int:
        return len(self._cursors)

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._cursors
