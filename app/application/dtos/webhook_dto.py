"""DTOs para webhooks de PayMongo."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PaymongoResource(BaseModel):
    """Recurso al que se refiere el evento (checkout_session, payment, payment_intent)."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    attributes: dict[str, Any] = Field(default_factory=dict)


class PaymongoEventAttributes(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    livemode: bool = False
    data: PaymongoResource


class PaymongoEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str = "event"
    attributes: PaymongoEventAttributes


class PaymongoEvent(BaseModel):
    """Sobre de evento: {"data": {"id", "attributes": {"type", "livemode", "data"}}}."""

    model_config = ConfigDict(extra="allow")

    data: PaymongoEventData

    @property
    def event_id(self) -> str:
        return self.data.id

    @property
    def event_type(self) -> str:
        return self.data.attributes.type

    @property
    def livemode(self) -> bool:
        return self.data.attributes.livemode

    @property
    def resource(self) -> PaymongoResource:
        return self.data.attributes.data


@dataclass
class WebhookDelivery:
    """Entrega cruda tal como llegó por HTTP."""

    raw_body: bytes
    signature: str | None
    headers: dict[str, str] = field(default_factory=dict)
    ip_address: str | None = None


@dataclass
class WebhookAck:
    """Respuesta que se devuelve a la pasarela cuando la firma es válida."""

    received: bool = True
    processed: bool = False
    error: str | None = None
