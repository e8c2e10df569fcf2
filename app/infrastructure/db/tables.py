from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)


class UTCDateTime(TypeDecorator):
    """Stores UTC and always hands back timezone-aware datetimes (SQLite drops tzinfo)."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


metadata = MetaData()

business_units = Table(
    "business_units",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("city", String(120)),
    Column("country", String(120)),
    Column("primary_currency", String(3), nullable=False, default="PHP"),
    Column("is_active", Boolean, nullable=False, default=True),
)

room_types = Table(
    "room_types",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("business_unit_id", String(36), ForeignKey("business_units.id"), nullable=False),
    Column("name", String(255), nullable=False),
    Column("base_rate", Numeric(12, 2), nullable=False),
    Column("max_occupancy", Integer, nullable=False),
    Column("max_adults", Integer, nullable=False),
    Column("max_children", Integer, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
)

guests = Table(
    "guests",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("business_unit_id", String(36), ForeignKey("business_units.id"), nullable=False),
    Column("first_name", String(120), nullable=False),
    Column("last_name", String(120), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(50)),
    Column("is_vip", Boolean, nullable=False, default=False),
    Column("is_blacklisted", Boolean, nullable=False, default=False),
    Column("source", String(32), nullable=False),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    UniqueConstraint("business_unit_id", "email", name="uq_guests_business_unit_email"),
)

reservations = Table(
    "reservations",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("business_unit_id", String(36), ForeignKey("business_units.id"), nullable=False),
    Column("guest_id", String(36), ForeignKey("guests.id"), nullable=False),
    Column("confirmation_number", String(50), nullable=False),
    Column("check_in_date", Date, nullable=False),
    Column("check_out_date", Date, nullable=False),
    Column("nights", Integer, nullable=False),
    Column("adults", Integer, nullable=False),
    Column("children", Integer, nullable=False),
    Column("subtotal", Numeric(12, 2), nullable=False),
    Column("taxes", Numeric(12, 2), nullable=False),
    Column("service_fee", Numeric(12, 2), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("status", String(32), nullable=False),
    Column("payment_status", String(32), nullable=False),
    Column("source", String(32), nullable=False),
    Column("special_requests", Text),
    Column("guest_notes", Text),
    Column("payment_provider", String(32)),
    Column("payment_intent_id", String(120)),
    Column("paid_at", UTCDateTime),
    Column("cancelled_at", UTCDateTime),
    Column("cancellation_reason", String(500)),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    UniqueConstraint("confirmation_number", name="uq_reservations_confirmation_number"),
)

reservation_rooms = Table(
    "reservation_rooms",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("reservation_id", String(36), ForeignKey("reservations.id"), nullable=False),
    Column("room_type_id", String(36), ForeignKey("room_types.id"), nullable=False),
    Column("base_rate", Numeric(12, 2), nullable=False),
    Column("rate_per_night", Numeric(12, 2), nullable=False),
    Column("nights", Integer, nullable=False),
    Column("adults", Integer, nullable=False),
    Column("children", Integer, nullable=False),
    Column("room_subtotal", Numeric(12, 2), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
)

payments = Table(
    "payments",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("reservation_id", String(36), ForeignKey("reservations.id"), nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("method", String(32)),
    Column("status", String(32), nullable=False),
    Column("provider", String(32), nullable=False),
    Column("provider_payment_id", String(120)),
    Column("provider_payment_intent_id", String(120)),
    Column("room_total", Numeric(12, 2), nullable=False, default=0),
    Column("taxes_total", Numeric(12, 2), nullable=False, default=0),
    Column("fees_total", Numeric(12, 2), nullable=False, default=0),
    Column("guest_name", String(255)),
    Column("guest_email", String(255)),
    Column("guest_phone", String(50)),
    Column("is_deposit_payment", Boolean, nullable=False, default=False),
    Column("provider_metadata", JSON),
    Column("failure_code", String(64)),
    Column("failure_message", String(500)),
    Column("processed_at", UTCDateTime),
    Column("captured_at", UTCDateTime),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    UniqueConstraint("provider_payment_id", name="uq_payments_provider_payment_id"),
)

payment_line_items = Table(
    "payment_line_items",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("payment_id", String(36), ForeignKey("payments.id"), nullable=False),
    Column("item_type", String(16), nullable=False),
    Column("item_id", String(36)),
    Column("item_name", String(255), nullable=False),
    Column("description", String(500)),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("valid_from", Date),
    Column("valid_to", Date),
)

checkout_sessions = Table(
    "checkout_sessions",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("payment_id", String(36), ForeignKey("payments.id"), nullable=False),
    Column("session_id", String(120), nullable=False),
    Column("url", String(1000)),
    Column("currency", String(3), nullable=False),
    Column("line_items", JSON),
    Column("success_url", String(1000)),
    Column("cancel_url", String(1000)),
    Column("customer_email", String(255)),
    Column("billing_details", JSON),
    Column("status", String(16), nullable=False),
    Column("expires_at", UTCDateTime),
    Column("session_metadata", JSON),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    UniqueConstraint("session_id", name="uq_checkout_sessions_session_id"),
)

provider_payments = Table(
    "provider_payments",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("payment_id", String(36), ForeignKey("payments.id"), nullable=False),
    Column("payment_intent_id", String(120)),
    Column("payment_method_id", String(120)),
    Column("source_id", String(120)),
    Column("checkout_session_id", String(120)),
    Column("provider_status", String(64)),
    Column("payment_method_type", String(64)),
    Column("client_key", String(255)),
    Column("billing_details", JSON),
    Column("intent_metadata", JSON),
    Column("application_fee", Numeric(12, 2)),
    Column("processing_fee", Numeric(12, 2)),
    UniqueConstraint("payment_id", name="uq_provider_payments_payment_id"),
)

provider_cards = Table(
    "provider_cards",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "provider_payment_id",
        String(36),
        ForeignKey("provider_payments.id"),
        nullable=False,
    ),
    Column("brand", String(32)),
    Column("last4", String(4)),
    Column("exp_month", Integer),
    Column("exp_year", Integer),
    Column("country", String(2)),
    UniqueConstraint("provider_payment_id", name="uq_provider_cards_provider_payment_id"),
)

webhook_events = Table(
    "webhook_events",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("event_id", String(120), nullable=False),
    Column("event_type", String(120), nullable=False),
    Column("resource_type", String(64)),
    Column("resource_id", String(120)),
    Column("signature", String(500)),
    Column("data", JSON),
    Column("headers", JSON),
    Column("ip_address", String(45)),
    Column("status", String(16), nullable=False),
    Column("retry_count", Integer, nullable=False, default=0),
    Column("livemode", Boolean, nullable=False, default=False),
    Column("error", Text),
    Column("processed_at", UTCDateTime),
    Column("created_at", UTCDateTime),
    UniqueConstraint("event_id", name="uq_webhook_events_event_id"),
)
