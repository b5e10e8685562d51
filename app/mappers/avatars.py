"""
app/mappers/avatars.py

Deterministic avatar URLs derived from entity names.
"""

from __future__ import annotations

from urllib.parse import quote

DOG_AVATAR_BASE_URL = "https://api.dicebear.com/7.x/thumbs/svg"
TRAINER_AVATAR_BASE_URL = "https://api.dicebear.com/7.x/initials/svg"


def dog_avatar_url(name: str) -> str:
    return f"{DOG_AVATAR_BASE_URL}?seed={quote(name.strip())}"


def trainer_avatar_url(name: str) -> str:
    return f"{TRAINER_AVATAR_BASE_URL}?seed={quote(name.strip())}"
