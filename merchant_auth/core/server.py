"""Process entry point: ``merchant-auth-server``."""

import logging

import uvicorn

from merchant_auth.core.log import configure_logging
from merchant_auth.core.settings import ServerSettings

logger = logging.getLogger(__name__)


def main() -> None:
    server = ServerSettings()
    configure_logging(server.log_level)
    logger.info("Server is running on http://%s:%d", server.host, server.port)
    logger.info("Health check available at http://%s:%d/health", server.host, server.port)
    uvicorn.run(
        "merchant_auth.core.app:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        log_level=server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
