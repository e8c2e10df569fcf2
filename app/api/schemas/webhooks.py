from pydantic import BaseModel


class WebhookAckResponse(BaseModel):
    received: bool
    processed: bool | None = None
    error: str | None = None
