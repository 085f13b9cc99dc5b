"""Application constants."""

DEFAULT_SERVICE_BASE = "http://api.zippopotam.us"
USER_AGENT = "postcode-lookup/1.0"
TRANSFORM_KINDS = ("buffered", "future", "streaming")
DEFAULT_TRANSFORM = "buffered"
DEFAULT_STREAM_CHUNK_SIZE = 1024
EXIT_SUCCESS = 0
EXIT_LOOKUP_FAILED = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "level",
    "run_id",
    "country",
    "zip_code",
    "transform",
    "event",
    "status",
    "duration_ms",
    "records_out",
    "error_code",
    "message",
)
