from __future__ import annotations
import logging, pathlib, sys

from . import storage
from .scheduler import ReminderScheduler

LOG_PATH = pathlib.Path(__file__).resolve().parent / "todoapp.log"

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH, encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
    )


def main():
    setup_logging()
    # create the schema
    storage.connect().close()
    scheduler = ReminderScheduler()
    scheduler.start()
    logger.info("Reminder service running, database at %s", storage.DB_PATH)
    try:
        while scheduler.is_alive():
            scheduler.join(timeout=1.0)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        scheduler.stop()
        scheduler.join(timeout=5.0)


if __name__ == "__main__":
    main()
