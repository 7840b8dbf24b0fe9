"""Engine start-up: logging, construction and catalog seeding."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from config.settings import Settings
from config.settings import settings as default_settings
from governance.engine import GovernanceEngine
from governance.logging_config import configure_logging

if TYPE_CHECKING:
    from governance.services.gateways import DataGateway, NotificationGateway

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def build_engine(
    data_gateway: DataGateway,
    notification_gateway: NotificationGateway,
    *,
    settings: Settings | None = None,
    configure_logs: bool = True,
    **engine_options: Any,
) -> GovernanceEngine:
    """Create a ready-to-use engine.

    On startup:
      1. Configure structlog from settings (unless *configure_logs* is false,
         e.g. when the host application owns logging)
      2. Build the engine around the injected gateways
      3. Seed the default processing activities when enabled
    """
    settings = settings or default_settings
    if configure_logs:
        configure_logging(settings)

    engine = GovernanceEngine(data_gateway, notification_gateway, settings=settings, **engine_options)

    if settings.seed_default_activities:
        seeded = await engine.seed_defaults()
        logger.info("app.catalog_seeded", count=len(seeded))

    logger.info("app.startup", env=settings.env, log_format=settings.log_format)
    return engine
