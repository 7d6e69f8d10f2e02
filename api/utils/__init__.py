"""Utility modules."""
from api.utils.errors import to_http_exception
from api.utils.json_utils import json_dump, json_load, read_json_file
from api.utils.time_utils import utc_now
from api.utils.validation import validate_id

__all__ = [
    "json_dump",
    "json_load",
    "read_json_file",
    "to_http_exception",
    "utc_now",
    "validate_id",
]
