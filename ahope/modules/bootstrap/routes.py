import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ahope.config.settings import Settings, settings
from ahope.core.dependencies import get_settings, is_init_authorized, limiter
from ahope.modules.bootstrap.service import initialize_application_data

logger = logging.getLogger(__name__)

# Lives under the Parse mount path so the front-end service worker leaves it alone.
router = APIRouter(prefix=settings.parse_mount_path, tags=["bootstrap"])


@router.post("/ahopeinit", response_class=PlainTextResponse)
@limiter.limit(settings.init_rate_limit)
async def initialize(
    request: Request,
    authorized: bool = Depends(is_init_authorized),
    app_settings: Settings = Depends(get_settings),
):
    """Create or update the application's classes, roles and class-level permissions"""
    logger.info("Request to initialize has been received.")
    if not authorized:
        return PlainTextResponse("Unauthorized.", status_code=401, headers={"WWW-Authenticate": "Basic"})
    try:
        await initialize_application_data(
            app_settings.parse_server_config(), app_settings.local_server_url
        )
    except Exception as e:
        logger.exception(f"Schema initialization failed: {e}")
        return PlainTextResponse("Schema initialization failed.", status_code=500)
    return PlainTextResponse("Schema initialization completed.")
