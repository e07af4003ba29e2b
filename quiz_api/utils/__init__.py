"""Utility modules."""
from quiz_api.utils.json_utils import json_load, read_json_file
from quiz_api.utils.validation import is_valid_id, validate_id

__all__ = [
    "is_valid_id",
    "json_load",
    "read_json_file",
    "validate_id",
]
