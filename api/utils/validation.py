"""Validation utilities."""
from fastapi import HTTPException


def validate_id(name: str, value: str) -> str:
    """Validate an identifier taken from the URL."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if "/" in cleaned or "\\" in cleaned or not cleaned.isalnum():
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned
