"""
Harmonizer - Release Metadata Lookup
Entry point of the harmonizer command.
"""

from typing import List, Optional

from harmonizer.core import ConfigurationError, setup_logging
from harmonizer.core.validation import validate_and_raise
from harmonizer.ui.cli import HarmonizerCLI

logger = setup_logging()


def main(args: Optional[List[str]] = None):
    """Validate the configuration, then hand over to the CLI."""
    try:
        validate_and_raise()
    except ConfigurationError as e:
        logger.error(str(e))
        raise SystemExit(3)
    logger.debug("Configuration validation passed")

    try:
        HarmonizerCLI().run(args)
    except SystemExit:
        raise
    except Exception:
        logger.exception("Unhandled exception occurred")
        raise


if __name__ == "__main__":
    main()
