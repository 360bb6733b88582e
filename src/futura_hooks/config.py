from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from futura_hooks.application.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    NOTIFICATIONS_URL: str = "https://observatory-7kdhmtcbfq-oa.a.run.app/notifications/email"
    NOTIFICATIONS_TOKEN: str = ""
    NOTIFICATIONS_REQUIRE_TOKEN: bool = True
    NOTIFICATIONS_MAX_RESPONSE_BYTES: int = 1000
    NOTIFICATIONS_TIMEOUT_SECONDS: float = 5.0

    IDEMPOTENCY_KEY_PREFIX: str = "futura-"
    EMAIL_REQUESTS_COLLECTION: str = "email_requests"

    REDIS_URL: str | None = "redis://localhost:6379/0"
    DOC_EVENTS_STREAM: str = "satellite.doc_events"
    DOC_EVENTS_GROUP: str = "futura-hooks"

    HOOKS_JWT_SECRET: str = ""
    HOOKS_JWT_ALGORITHM: str = "HS256"

    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


@dataclass(frozen=True, slots=True)
class DispatcherConfig:
    """Everything the notification dispatcher needs, resolved once at start-up."""

    url: str
    token: str
    max_response_bytes: int = 1000
    timeout_seconds: float = 5.0
    idempotency_key_prefix: str = "futura-"
    require_token: bool = True

    @classmethod
    def from_settings(cls, s: Settings) -> DispatcherConfig:
        return cls(
            url=s.NOTIFICATIONS_URL,
            token=s.NOTIFICATIONS_TOKEN,
            max_response_bytes=s.NOTIFICATIONS_MAX_RESPONSE_BYTES,
            timeout_seconds=s.NOTIFICATIONS_TIMEOUT_SECONDS,
            idempotency_key_prefix=s.IDEMPOTENCY_KEY_PREFIX,
            require_token=s.NOTIFICATIONS_REQUIRE_TOKEN,
        )

    def validate(self) -> DispatcherConfig:
        if not self.url:
            raise ConfigurationError("NOTIFICATIONS_URL must be set")
        if self.max_response_bytes < 0:
            raise ConfigurationError("NOTIFICATIONS_MAX_RESPONSE_BYTES must not be negative")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("NOTIFICATIONS_TIMEOUT_SECONDS must be positive")
        if not self.token:
            if self.require_token:
                raise ConfigurationError(
                    "NOTIFICATIONS_TOKEN is not set; refusing to send unauthenticated requests"
                )
            logger.warning("NOTIFICATIONS_TOKEN is empty, outbound requests carry an empty bearer token")
        return self


settings = Settings()
