from decimal import Decimal

FieldValue = str | Decimal | None

STRING_FIELDS: tuple[str, ...] = (
    "client_name",
    "client_id",
    "invoice_no",
    "invoice_date",
    "period",
    "purpose",
    "status",
    "link",
)

NUMERIC_FIELDS: tuple[str, ...] = (
    "amount_excl_gst",
    "gst_percentage",
    "total_incl_gst",
)

FIELD_KEYS: frozenset[str] = frozenset(STRING_FIELDS + NUMERIC_FIELDS)

DEFAULT_GST_PERCENTAGE = Decimal("18")
DEFAULT_STATUS = "Unpaid"
