from dataclasses import dataclass
from datetime import datetime


def normalize_email(email: str) -> str:
    """Login key form: trimmed and lower-cased."""
    return email.strip().lower()


@dataclass
class User:
    """Domain model representing an account."""
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
