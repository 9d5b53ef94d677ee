import argparse
import sys

from release_digest.config.logger_config import logger
from release_digest.config.settings import DEFAULT_SETTINGS_PATH, load_settings
from release_digest.digest import run_digest
from release_digest.domain.errors import ReleaseDigestError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mail a digest of new releases from your starred repositories.")
    parser.add_argument("--settings", default=str(DEFAULT_SETTINGS_PATH), help="Path to settings JSON.")
    parser.add_argument("--output-dir", default=None, help="Write HTML pages here instead of sending mail.")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(args.settings)
        summary = run_digest(
            settings,
            output_dir=args.output_dir,
            show_progress=not args.no_progress,
        )
    except ReleaseDigestError as exc:
        logger.error("Release digest failed: {}", exc)
        return 1
    logger.info("{}", summary)
    return 0


# python -m release_digest
if __name__ == "__main__":
    sys.exit(main())
