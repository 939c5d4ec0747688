"""
Main entry point for the order desk API server.
"""

import logging

from orderdesk.api import create_app, get_services
from orderdesk.utils.config import get_config

logger = logging.getLogger(__name__)


def main() -> int:
    """Load configuration, open the database pool, and serve the API."""
    try:
        config = get_config()
        app = create_app(config)
    except Exception as e:
        logger.error(f"Failed to start order desk: {e}")
        return 1

    logger.info(f"Order desk listening on {config.host}:{config.port}")
    try:
        app.run(host=config.host, port=config.port, debug=config.debug)
    finally:
        with app.app_context():
            get_services().db.close()

    return 0


if __name__ == "__main__":
    exit(main())
