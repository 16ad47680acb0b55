"""
Core dependencies for route protection and rate limiting
"""

import hashlib
import logging
import secrets
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from slowapi import Limiter
from slowapi.util import get_remote_address

from ahope.config.settings import Settings, settings

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

init_security = HTTPBasic(auto_error=False)


def get_settings() -> Settings:
    return settings


def expected_init_secret(mk_salt: str) -> str:
    """Password expected on the init endpoint: SHA-256 hex digest of MK_SALT (known to the build)"""
    return hashlib.sha256(mk_salt.encode()).hexdigest()


def is_init_authorized(
    credentials: Optional[HTTPBasicCredentials] = Security(init_security),
    app_settings: Settings = Depends(get_settings),
) -> bool:
    """Check the init endpoint credentials when MK_SALT is configured (i.e. outside local development)"""
    if not app_settings.mk_salt:
        return True
    expected = expected_init_secret(app_settings.mk_salt)
    if credentials is None or not secrets.compare_digest(credentials.password, expected):
        logger.info("Request to initialize schema is rejected as unauthorized.")
        return False
    return True
