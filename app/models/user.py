"""
app/models/user.py

Purpose: User document model

- Email and bcrypt password hash
- Profile fields (full name, bio, profile picture URL)
- Creation/update timestamps
"""

from datetime import datetime, timezone
from typing import Dict, Any


def new_user_document(full_name: str, email: str, password_hash: str, bio: str) -> Dict[str, Any]:
    """Builds the document inserted at signup."""
    now = datetime.now(timezone.utc)
    return {
        "email": email,
        "password": password_hash,
        "full_name": full_name,
        "bio": bio,
        "profile_pic": "",
        "created_at": now,
        "updated_at": now,
    }


# Never sent to clients
PRIVATE_FIELDS = frozenset({"password"})


def public_projection() -> Dict[str, int]:
    """Builds a new projection hiding PRIVATE_FIELDS for every query."""
    return {field: 0 for field in PRIVATE_FIELDS}
