import argparse
import logging

from vaxbot.config import load_settings
from vaxbot.worker import run_check_once

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_FAILURE = 2


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    # httpx logs every request at INFO; keep it for verbose runs only.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def main() -> int:
    parser = argparse.ArgumentParser(description="vaxbot: first-dose vaccination slot watcher")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every center, place and empty result")
    args = parser.parse_args()

    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()
    except Exception as e:
        _setup_logging(args.verbose)
        logger.error("Invalid configuration (%s: %s)", type(e).__name__, e)
        return EXIT_FAILURE

    _setup_logging(args.verbose or settings.verbose)

    try:
        report = run_check_once(settings)
    except Exception as e:
        # Стектрейс только в verbose-режиме
        logger.error("Check failed (%s: %s)", type(e).__name__, e, exc_info=args.verbose or settings.verbose)
        return EXIT_FAILURE

    if report.found:
        logger.warning("Found %d available slots", report.total)
        return EXIT_FOUND

    logger.info("No available slots found")
    return EXIT_NOT_FOUND


if __name__ == "__main__":
    raise SystemExit(main())
