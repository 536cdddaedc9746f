"""Application constants."""

USER_AGENT = "pincode-points/0.1 (+dashboard; contact: configured-email)"
STAGES = (
    "fetch",
    "aggregate",
    "export",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
ROLES = ("start", "end")
UNKNOWN_PINCODE = "Unknown"
CANONICAL_PRECISION = 5
PLACEHOLDER_VALUES = frozenset({"", "null", "undefined"})
REQUIRED_FIELDS = ("start_gps", "end_gps", "start_area_code", "end_area_code")
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
