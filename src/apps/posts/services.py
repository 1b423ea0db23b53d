"""
Post services.

This module holds the business rules for posts: input checks, ownership,
tag normalisation and transaction boundaries. Queries live in
`repositories`; views only translate HTTP to these calls.

Every mutating operation takes the acting user's id as an explicit
argument. Views pass `request.user.pk`; the id is never read from request
data.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from django.conf import settings
from django.db import transaction

from apps.core.exceptions import (
    AuthenticationFailedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from apps.core.services import translate_storage_errors

from . import repositories, tags
from .models import TITLE_MAX_LENGTH, Post
from .permissions import is_post_owner, normalize_principal_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostPage:
    """One page of the post feed."""

    items: list[Post]
    next_cursor: Optional[int]
    has_next_page: bool


def _require_principal(user_id: Any) -> int:
    principal_id = normalize_principal_id(user_id)
    if principal_id is None:
        raise AuthenticationFailedError("Authentication required.")
    return principal_id


def _clean_post_fields(title: Optional[str], content: Optional[str]) -> tuple[str, str]:
    if title is None or not title.strip():
        raise ValidationError("Title is required.")
    if content is None or not content.strip():
        raise ValidationError("Content is required.")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters.")
    return title, content


def _positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer.")
    return value


def create_post(
    *,
    owner_id: Any,
    title: Optional[str],
    content: Optional[str],
    tag_names: Optional[Iterable[str]] = None,
) -> Post:
    """
    Creates a post with its tags in one transaction.

    Args:
        owner_id: Id of the authenticated author.
        title: Post title, must not be blank.
        content: Post body, must not be blank.
        tag_names: Free-text tag names; blanks and duplicates are dropped.

    Returns:
        The new post with author and tags loaded.
    """
    author_id = _require_principal(owner_id)
    title, content = _clean_post_fields(title, content)
    names = tags.normalize_tag_names(tag_names)

    with translate_storage_errors("create_post"):
        with transaction.atomic():
            post = repositories.create_post(author_id=author_id, title=title, content=content)
            repositories.add_post_tags(post, tags.resolve_tags(names))
        hydrated = repositories.get_post(post.pk)

    logger.info(
        "Post created successfully.",
        extra={"post_id": post.pk, "author_id": author_id, "tag_count": len(names)},
    )
    return hydrated


def get_posts() -> list[Post]:
    """
    Returns every post, newest first. Unpaginated; use
    `get_posts_paginated` for anything user-facing.
    """
    with translate_storage_errors("get_posts"):
        return list(repositories.hydrated_posts())


def count_posts() -> int:
    with translate_storage_errors("count_posts"):
        return repositories.count_posts()


def get_posts_paginated(
    *,
    limit: Optional[int] = None,
    cursor: Optional[int] = None,
    search_query: Optional[str] = None,
) -> PostPage:
    """
    Returns one page of posts ordered by descending id.

    One row beyond `limit` is fetched to learn whether another page
    exists; it is dropped before returning. Following `next_cursor` from
    page to page walks the whole filtered feed once, without gaps or
    repeats, as long as nothing is written in between.

    Args:
        limit: Page size, 1..POSTS_MAX_PAGE_SIZE. Defaults to
            POSTS_DEFAULT_PAGE_SIZE.
        cursor: Id of the last post of the previous page; excluded.
        search_query: Case-insensitive substring of title, content or a
            tag name, matched as given (surrounding spaces included).
            Blank means no filter.
    """
    if limit is None:
        limit = settings.POSTS_DEFAULT_PAGE_SIZE
    limit = _positive_int(limit, "limit")
    if limit > settings.POSTS_MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be at most {settings.POSTS_MAX_PAGE_SIZE}.")
    if cursor is not None:
        cursor = _positive_int(cursor, "cursor")
    query = search_query if search_query and search_query.strip() else None

    with translate_storage_errors("get_posts_paginated"):
        rows = list(
            repositories.search_posts(search_query=query, before_id=cursor)[
                : limit + 1
            ]
        )

    has_next_page = len(rows) > limit
    items = rows[:limit]
    return PostPage(
        items=items,
        next_cursor=items[-1].pk if has_next_page else None,
        has_next_page=has_next_page,
    )


def get_post(*, post_id: int) -> Post:
    """
    Raises:
        NotFoundError: If no post has this id.
    """
    with translate_storage_errors("get_post"):
        post = repositories.get_post(post_id)
    if post is None:
        raise NotFoundError("Post not found.")
    return post


def _get_owned_post_for_update(post_id: int, acting_user_id: int, action: str) -> Post:
    post = repositories.get_post_for_update(post_id)
    if post is None:
        raise NotFoundError("Post not found.")
    if not is_post_owner(post, acting_user_id):
        logger.warning(
            "Rejected %s by non-owner.",
            action,
            extra={"post_id": post_id, "user_id": acting_user_id},
        )
        raise ForbiddenError()
    return post


def update_post(
    *,
    post_id: int,
    acting_user_id: Any,
    title: Optional[str],
    content: Optional[str],
    tag_names: Optional[Iterable[str]] = None,
) -> Post:
    """
    Replaces title, content and the whole tag set of a post.

    The post row is locked for the duration of the transaction, so no
    reader sees the old associations removed without the new ones in place.

    Raises:
        AuthenticationFailedError: Without an acting user.
        NotFoundError: If the post does not exist.
        ForbiddenError: If the acting user is not the author.
    """
    user_id = _require_principal(acting_user_id)
    title, content = _clean_post_fields(title, content)
    names = tags.normalize_tag_names(tag_names)

    with translate_storage_errors("update_post"):
        with transaction.atomic():
            post = _get_owned_post_for_update(post_id, user_id, "update")
            repositories.update_post_fields(post, title=title, content=content)
            repositories.replace_post_tags(post, tags.resolve_tags(names))
        hydrated = repositories.get_post(post.pk)

    logger.info(
        "Post updated successfully.",
        extra={"post_id": post.pk, "author_id": user_id, "tag_count": len(names)},
    )
    return hydrated


def delete_post(*, post_id: int, acting_user_id: Any) -> dict[str, bool]:
    """
    Deletes a post and its tag associations. Tags left unused are kept.

    Raises:
        AuthenticationFailedError: Without an acting user.
        NotFoundError: If the post does not exist.
        ForbiddenError: If the acting user is not the author.
    """
    user_id = _require_principal(acting_user_id)

    with translate_storage_errors("delete_post"), transaction.atomic():
        post = _get_owned_post_for_update(post_id, user_id, "delete")
        repositories.delete_post(post)

    logger.info("Post deleted.", extra={"post_id": post_id, "author_id": user_id})
    return {"success": True}
