from pathlib import Path

from release_digest.application.ports import DigestSinkPort
from release_digest.config.logger_config import logger
from release_digest.domain.errors import DigestDeliveryError
from release_digest.domain.rules import make_digest_filename


class HtmlFileDigestSink(DigestSinkPort):
    def __init__(self, output_dir: str | Path, run_id: str) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.run_id = run_id
        self.written: list[Path] = []

    async def deliver(self, document: str, page_number: int, page_count: int) -> None:
        file_path = self.output_dir / make_digest_filename(self.run_id, page_number)
        try:
            with file_path.open("w", encoding="utf-8") as f:
                f.write(document)
        except OSError as exc:
            raise DigestDeliveryError(f"Unable to write {file_path}: {exc}") from exc
        self.written.append(file_path)
        logger.info("Saved digest page {}/{}: {}", page_number, page_count, str(file_path))
