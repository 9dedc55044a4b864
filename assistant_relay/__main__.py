"""Entry point: ``python -m assistant_relay [slack|http]``."""

import logging
import os
import sys

import uvicorn

from .config import RelayConfig
from .http_api import create_app
from .runner import RelayRunner

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

MODES = ("slack", "http")


def main(argv=None):
    """Run the relay as a Slack bot or as an HTTP service."""
    argv = sys.argv[1:] if argv is None else argv
    mode = argv[0] if argv else "slack"
    if mode not in MODES:
        print(f"Usage: python -m assistant_relay [{'|'.join(MODES)}]", file=sys.stderr)
        return 2

    config = RelayConfig.from_env()

    if mode == "http":
        logger.info(f"Starting assistant relay on {config.http_host}:{config.http_port}")
        uvicorn.run(create_app(config=config), host=config.http_host, port=config.http_port)
    else:
        RelayRunner(config=config).start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
