"""Entry point for the local report collector server."""

import logging

from report_collector.app import create_app
from report_collector.config import configure_logging, load_config


def main():
    config = load_config()
    configure_logging(config)

    logger = logging.getLogger(__name__)
    logger.info("Starting report collector — route=%s, sink=%s, listening on %s:%d",
                config.route, config.sink, config.host, config.port)

    app = create_app(config)
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
