import json
import os
from pathlib import Path

from release_digest.application.ports import CursorStorePort
from release_digest.config.logger_config import logger
from release_digest.domain.cursors import ReleaseCursors


class JsonCursorStore(CursorStorePort):
    """Cursor mapping persisted as a single JSON object file.

    Neither ``load`` nor ``save`` raises: an unreadable file degrades to an
    empty mapping and a failed write is only logged.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> ReleaseCursors:
        if not self.path.exists():
            logger.info("Cursor file {} not found, starting with empty history", str(self.path))
            return ReleaseCursors()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Unable to read cursor file {}: {}", str(self.path), exc)
            return ReleaseCursors()

        if not isinstance(data, dict):
            logger.warning("Cursor file {} is not a JSON object, ignoring it", str(self.path))
            return ReleaseCursors()

        cursors: dict[str, str] = {}
        for full_name, guid in data.items():
            if not isinstance(guid, str):
                logger.warning("Drop non-string cursor for {}: {!r}", full_name, guid)
                continue
            cursors[str(full_name)] = guid
        logger.info("Loaded {} cursors from {}", len(cursors), str(self.path))
        return ReleaseCursors(cursors)

    def save(self, cursors: ReleaseCursors) -> bool:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            payload = json.dumps(cursors.to_dict(), ensure_ascii=False, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload + "\n", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Unable to write cursor file {}: {}", str(self.path), exc)
            if tmp_path.exists():
                tmp_path.unlink()
            return False
        logger.info("Saved {} cursors to {}", len(cursors), str(self.path))
        return True
