"""Excepciones de dominio para el sistema de reservaciones de hotel."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    http_status = 400

    def __init__(self, message: str, code: str | None = None, details: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details
        super().__init__(self.message)


# === Errores de validación de la reserva ===


class InvalidPropertyError(DomainError):
    """La propiedad (business unit) no existe o está inactiva."""

    def __init__(self, business_unit_id: str):
        super().__init__(
            message="Invalid or inactive property",
            code="INVALID_PROPERTY",
            details="The selected property is not available for booking",
        )
        self.business_unit_id = business_unit_id


class InvalidRoomTypeError(DomainError):
    """El tipo de habitación no existe, está inactivo o es de otra propiedad."""

    def __init__(self, room_type_id: str):
        super().__init__(
            message="Invalid room type",
            code="INVALID_ROOM_TYPE",
            details="The selected room type is not available",
        )
        self.room_type_id = room_type_id


class OccupancyExceededError(DomainError):
    """Adultos + niños excede la ocupación máxima del tipo de habitación."""

    def __init__(self, max_occupancy: int, requested: int):
        super().__init__(
            message="Occupancy exceeded",
            code="OCCUPANCY_EXCEEDED",
            details=f"Maximum {max_occupancy} guests allowed for this room type",
        )
        self.max_occupancy = max_occupancy
        self.requested = requested


class TooManyAdultsError(DomainError):
    """Demasiados adultos para el tipo de habitación."""

    def __init__(self, max_adults: int, requested: int):
        super().__init__(
            message="Too many adults",
            code="TOO_MANY_ADULTS",
            details=f"Maximum {max_adults} adults allowed for this room type",
        )
        self.max_adults = max_adults
        self.requested = requested


class TooManyChildrenError(DomainError):
    """Demasiados niños para el tipo de habitación."""

    def __init__(self, max_children: int, requested: int):
        super().__init__(
            message="Too many children",
            code="TOO_MANY_CHILDREN",
            details=f"Maximum {max_children} children allowed for this room type",
        )
        self.max_children = max_children
        self.requested = requested


class InvalidStayDatesError(DomainError):
    """La fecha de salida no es posterior a la de llegada."""

    def __init__(self, message: str = "checkOutDate must be after checkInDate"):
        super().__init__(message="Invalid stay dates", code="INVALID_STAY_DATES", details=message)


class PriceMismatchError(DomainError):
    """El desglose de precio no suma el total enviado."""

    def __init__(self, expected_total, received_total):
        super().__init__(
            message="Price mismatch",
            code="PRICE_MISMATCH",
            details=(
                f"subtotal + taxes + serviceFee = {expected_total} "
                f"but totalAmount = {received_total}"
            ),
        )
        self.expected_total = expected_total
        self.received_total = received_total


# === Errores de reservación ===


class ReservationNotFoundError(DomainError):
    """La reservación no existe."""

    http_status = 404

    def __init__(self, reservation_ref: str):
        super().__init__(
            message="Reservation not found",
            code="RESERVATION_NOT_FOUND",
            details=f"No reservation matches {reservation_ref}",
        )
        self.reservation_ref = reservation_ref


class ReservationCreationFailedError(DomainError):
    """Falló la transacción de creación de la reserva."""

    http_status = 500

    def __init__(self, details: str | None = None):
        super().__init__(
            message="Failed to create reservation",
            code="RESERVATION_CREATION_FAILED",
            details=details or "Unknown error occurred",
        )


class ConfirmationCollisionError(DomainError):
    """El número de confirmación generado ya existe en almacenamiento."""

    http_status = 500

    def __init__(self, confirmation_number: str):
        super().__init__(
            message="Failed to create reservation",
            code="CONFIRMATION_COLLISION",
            details=f"Confirmation number already in use: {confirmation_number}",
        )
        self.confirmation_number = confirmation_number


class ReservationAlreadyPaidError(DomainError):
    """La reservación ya fue pagada; no se abre otra sesión de pago."""

    http_status = 409

    def __init__(self, reservation_id: str):
        super().__init__(
            message="Reservation already paid",
            code="RESERVATION_ALREADY_PAID",
            details=f"Reservation {reservation_id} has already been paid",
        )
        self.reservation_id = reservation_id


# === Errores de pago ===


class PaymentGatewayError(DomainError):
    """Error al comunicarse con la pasarela de pago (reintentable)."""

    http_status = 500

    def __init__(self, details: str, http_status: int | None = None):
        super().__init__(
            message="Payment gateway error",
            code="PAYMENT_GATEWAY_ERROR",
            details=details,
        )
        self.gateway_http_status = http_status


# === Errores de webhook (ingreso) ===


class WebhookIngressError(DomainError):
    """Base para rechazos de webhook antes de cualquier efecto."""


class WebhookConfigurationError(WebhookIngressError):
    """Falta la firma, el cuerpo o el secreto compartido."""

    def __init__(self, details: str = "Missing signature or secret"):
        super().__init__(message="Configuration error", code="WEBHOOK_CONFIGURATION", details=details)


class InvalidSignatureError(WebhookIngressError):
    """La firma HMAC del webhook no coincide."""

    http_status = 401

    def __init__(self):
        super().__init__(message="Invalid signature", code="INVALID_SIGNATURE")


class MalformedEventError(WebhookIngressError):
    """El cuerpo no es JSON o no tiene la forma del sobre de evento."""

    def __init__(self, details: str | None = None):
        super().__init__(message="Invalid event structure", code="MALFORMED_EVENT", details=details)


# === Errores de reconciliación ===


class ReconciliationFailedError(DomainError):
    """Un handler de webhook no pudo aplicar el resultado del pago."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message=message, code="RECONCILIATION_FAILED")
