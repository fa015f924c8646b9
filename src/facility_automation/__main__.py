"""Run the facility-automation service: python -m facility_automation."""

import logging

from aiohttp import web

from facility_automation.config import FacilityConfig, configure_logging
from facility_automation.runtime import FacilityRuntime
from facility_automation.server import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    config = FacilityConfig.from_env()
    configure_logging(config.log_level)

    runtime = FacilityRuntime.create(config)
    app = create_app(runtime)

    logger.info(f"Facility automation backend running on port {config.port}")
    logger.info(f"Access the system at: http://localhost:{config.port}")
    web.run_app(app, host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
