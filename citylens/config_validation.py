"""Shared configuration validation helpers."""

from __future__ import annotations


def require_positive_int(value: int, field_name: str) -> int:
    """Validate a positive integer input and return it."""
    if value <= 0:
        raise ValueError(f"{field_name} must be greater than zero.")
    return value


def require_non_negative_float(value: float, field_name: str) -> float:
    """Validate a float that may be zero but never negative."""
    if value < 0:
        raise ValueError(f"{field_name} must be zero or greater.")
    return value


def require_positive_float(value: float, field_name: str) -> float:
    """Validate a strictly positive float input and return it."""
    if value <= 0:
        raise ValueError(f"{field_name} must be greater than zero.")
    return value


def validate_choice(value: str, field_name: str, allowed: set[str]) -> str:
    """Validate that a string value is within a set of allowed options."""
    if value not in allowed:
        options = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {options}.")
    return value


def validate_provider_name(value: str) -> str:
    """Validate the model provider option."""
    return validate_choice(value, "provider", {"openai", "mock"})


def validate_port(value: int) -> int:
    """Validate a TCP port number."""
    if value <= 0 or value > 65535:
        raise ValueError("port must be between 1 and 65535.")
    return value
