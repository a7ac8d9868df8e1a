"""Shared helpers for ORM models."""
import secrets


def generate_id(prefix: str) -> str:
    """Generate a prefixed random identifier, e.g. ``scres_3f9a1c2b7d4e``."""
    return f"{prefix}_{secrets.token_hex(6)}"
