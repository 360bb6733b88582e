from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, StrictStr


def render_notification_text(recipient_name: str, user_name: str) -> str:
    return (
        f"Hello {recipient_name},\n\n"
        f"{user_name} has shared some files with you through Futura.\n\n"
        "You can access your shared files at: https://futura.app\n\n"
        "Best regards,\n"
        "The Futura Team"
    )


class NotificationRequest(BaseModel):
    """Document data written to the email requests collection."""

    sender: StrictStr = Field(alias="from")
    to: StrictStr
    subject: StrictStr
    text: StrictStr
    user_name: StrictStr
    recipient_name: StrictStr

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NotificationPayload(BaseModel):
    sender: str = Field(alias="from")
    to: str
    subject: str
    text: str

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True, slots=True)
class OutboundCallConfig:
    url: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    method: str = "POST"
    max_response_bytes: int = 1000
    timeout_seconds: float = 5.0


@dataclass(frozen=True, slots=True)
class OutcallResponse:
    status: int
    body: bytes
