"""Entidad WebhookEvent - registro durable de cada notificación de la pasarela."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class WebhookEventStatus(str, Enum):
    """Estados de procesamiento de un evento de webhook."""

    PROCESSING = "processing"
    PROCESSED = "processed"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass
class WebhookEvent:
    """
    Evento recibido de PayMongo, identificado por el id que asigna la pasarela.

    Un evento en estado PROCESSED no vuelve a ejecutar efectos. Los registros
    nunca se borran.
    """

    id: str = ""
    event_id: str = ""
    event_type: str = ""
    resource_type: str | None = None
    resource_id: str | None = None
    signature: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    status: WebhookEventStatus = WebhookEventStatus.PROCESSING
    retry_count: int = 0
    livemode: bool = False
    error: str | None = None
    processed_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_processed(self) -> bool:
        return self.status == WebhookEventStatus.PROCESSED
