"""Fixed invoice column layout shared by extraction prompts and exports."""

SL_NO = "SL No."
FILE_NAME = "File Name"

# Column header -> record field key, in display order.
FIELD_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Client Name", "client_name"),
    ("Client ID", "client_id"),
    ("Invoice No", "invoice_no"),
    ("Invoice Date", "invoice_date"),
    ("Period", "period"),
    ("Purpose", "purpose"),
    ("Amount (excl. GST)", "amount_excl_gst"),
    ("GST % Used", "gst_percentage"),
    ("Total incl. GST", "total_incl_gst"),
    ("Status", "status"),
    ("Link", "link"),
)

EXPORT_COLUMNS: tuple[str, ...] = (
    SL_NO,
    *(header for header, _ in FIELD_COLUMNS),
    FILE_NAME,
)

# File Name is provenance added after extraction, never asked of the model.
EXTRACTION_COLUMNS: tuple[str, ...] = EXPORT_COLUMNS[:-1]
