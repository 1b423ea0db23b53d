"""Turning user-entered tag names into Tag rows."""

import logging
from typing import Iterable, Optional

from apps.core.exceptions import ValidationError

from . import repositories
from .models import TAG_NAME_MAX_LENGTH, Tag

logger = logging.getLogger(__name__)


def normalize_tag_names(names: Optional[Iterable[str]]) -> list[str]:
    """
    Trim whitespace, drop blanks and collapse exact duplicates.

    Case is preserved: "A" and "a" are different tags. First-seen order is
    kept.

    Raises:
        ValidationError: If a name is longer than a tag name may be.
    """
    unique: dict[str, None] = {}
    for raw in names or ():
        if raw is None:
            continue
        name = str(raw).strip()
        if not name:
            continue
        if len(name) > TAG_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Tag names must be at most {TAG_NAME_MAX_LENGTH} characters."
            )
        unique.setdefault(name, None)
    return list(unique)


def resolve_tags(names: Optional[Iterable[str]]) -> list[Tag]:
    """
    Return one Tag per distinct normalised name, creating missing ones.

    Callers run this inside their own transaction; database errors
    propagate unchanged.
    """
    resolved: dict[int, Tag] = {}
    for name in normalize_tag_names(names):
        tag, created = repositories.get_or_create_tag(name)
        if created:
            logger.debug("Tag created.", extra={"tag_id": tag.pk})
        resolved.setdefault(tag.pk, tag)
    return list(resolved.values())
