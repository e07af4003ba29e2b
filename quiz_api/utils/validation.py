"""Validation utilities."""
from fastapi import HTTPException

MAX_ID_LENGTH = 64


def is_valid_id(value: str) -> bool:
    """True for a non-empty id without path separators or whitespace."""
    return (
        bool(value)
        and len(value) <= MAX_ID_LENGTH
        and "/" not in value
        and "\\" not in value
        and not any(c.isspace() for c in value)
    )


def validate_id(name: str, value: str) -> str:
    """Validate ID string (non-empty, no path separators or whitespace)."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if not is_valid_id(cleaned):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned
