"""
Ownership checks for posts.

Write access itself is gated by DRF's `IsAuthenticatedOrReadOnly` on the
viewset; the services call `is_post_owner` on the row they have locked.
"""

from typing import Any, Optional


def normalize_principal_id(value: Any) -> Optional[int]:
    """
    Convert a principal id to the integer form used for user primary keys.

    Session and token layers hand ids around as text, so a string of ASCII
    digits is accepted. Anything else (bools, floats, signs, padding) maps
    to None and never matches an owner.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def is_post_owner(post: Any, acting_user_id: Any) -> bool:
    """True only when `acting_user_id` names the post's author."""
    acting = normalize_principal_id(acting_user_id)
    return acting is not None and post.author_id == acting
