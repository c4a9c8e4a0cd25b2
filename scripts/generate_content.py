import logging
import sys
from typing import Optional

from app.exceptions import ContentError
from app.services.snapshot import build_snapshot, write_snapshot
from app.settings import Settings, settings

logger = logging.getLogger(__name__)


def generate_content(current_settings: Optional[Settings] = None) -> int:
    """Parse every post under the content root and write the snapshot file."""
    current_settings = current_settings or settings
    entries = build_snapshot(current_settings)
    write_snapshot(entries, current_settings.SNAPSHOT_PATH)
    logger.info(f"Generated {len(entries)} posts.")
    return len(entries)


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        generate_content()
    except ContentError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Content generation failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
