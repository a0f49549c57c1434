"""
Run the service: python -m newsletter
"""

import logging
import sys

from newsletter.app import create_app
from newsletter.core.errors import ConfigurationError
from newsletter.core.logging_service import setup_logging

logger = logging.getLogger('newsletter')


def main():
    setup_logging()

    try:
        app = create_app()
    except ConfigurationError as e:
        logger.critical(f"FATAL ERROR: {e.message}")
        sys.exit(1)

    port = app.config['PORT']
    logger.info(f"Server running on http://localhost:{port}")
    app.run(host='0.0.0.0', port=port)


if __name__ == '__main__':
    main()
