import base64
import hashlib
import hmac
import os
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParseServerConfig(BaseModel):
    """Connection settings handed to every component that talks to Parse Server."""

    model_config = ConfigDict(frozen=True)

    app_id: str
    master_key: str
    server_url: str
    timeout: float = 30.0


class Settings(BaseSettings):
    # Parse Server
    app_id: str = "AHOPE-App-in-Parse"
    master_key: Optional[str] = None
    server_url: Optional[str] = None
    parse_local_url: Optional[str] = None
    parse_mount_path: str = "/parse"
    http_timeout: float = 30.0

    # Google App Engine / Cloud build
    project_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("GOOGLE_CLOUD_PROJECT", "PROJECT_ID")
    )
    gae_version: Optional[str] = None
    gae_service: str = "default"
    mk_salt: Optional[str] = None  # Generated at build time; also guards the init endpoint

    # App
    app_name: str = "ahope-backend"
    port: int = 8080
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:8080"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    init_rate_limit: str = "5/minute"

    @model_validator(mode="after")
    def _resolve_master_key(self) -> "Settings":
        # A version-specific key is shared by every instance of that version;
        # otherwise the key only has to outlive this process.
        if not self.master_key:
            if self.gae_version and self.mk_salt:
                digest = hmac.new(self.mk_salt.encode(), self.gae_version.encode(), hashlib.sha256).digest()
                self.master_key = base64.b64encode(digest).decode()
            else:
                self.master_key = base64.b64encode(os.urandom(48)).decode()
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def resolved_server_url(self) -> str:
        if self.server_url:
            return self.server_url
        return f"https://{self.project_id}.appspot.com{self.parse_mount_path}"

    @property
    def version_specific_server_url(self) -> str:
        """URL that targets the App Engine version this process belongs to."""
        if self.server_url:
            return self.server_url
        if self.gae_version:
            return (
                f"https://{self.gae_version}-dot-{self.gae_service}-dot-{self.project_id}"
                f".appspot.com{self.parse_mount_path}"
            )
        return self.resolved_server_url

    @property
    def local_server_url(self) -> str:
        """Loopback URL the init endpoint uses to reach Parse Server"""
        if self.parse_local_url:
            return self.parse_local_url
        return f"http://localhost:{self.port}{self.parse_mount_path}"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def parse_server_config(self) -> ParseServerConfig:
        return ParseServerConfig(
            app_id=self.app_id,
            master_key=self.master_key,
            server_url=self.resolved_server_url,
            timeout=self.http_timeout,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
