"""
Post and Tag repositories.

All ORM access for the posts app goes through here. Repositories are used
to abstract the data access layer from the services, following the
Repository Pattern:
- Business rules and transactions stay in `services`.
- Query shape (joins, prefetches, ordering) is defined once and reused.
- Services can be unit-tested with these functions mocked.
"""

from typing import Iterable, Optional

from .models import Post, PostQuerySet, PostTag, Tag


def hydrated_posts() -> PostQuerySet:
    """
    Returns every post, newest id first, with author and tags loaded.
    """
    return Post.objects.hydrated().newest_first()


def search_posts(
    *, search_query: Optional[str] = None, before_id: Optional[int] = None
) -> PostQuerySet:
    """
    Returns hydrated posts matching `search_query`, newest id first.

    Args:
        search_query: Substring to look for in title, content or tag names.
        before_id: Only posts with an id strictly below this one.
    """
    queryset = hydrated_posts().search(search_query)
    if before_id is not None:
        queryset = queryset.filter(id__lt=before_id)
    return queryset


def count_posts() -> int:
    return Post.objects.count()


def get_post(post_id: int) -> Optional[Post]:
    return hydrated_posts().filter(pk=post_id).first()


def get_post_for_update(post_id: int) -> Optional[Post]:
    """Fetch and row-lock a post. Must run inside a transaction."""
    return Post.objects.select_for_update().filter(pk=post_id).first()


def create_post(*, author_id: int, title: str, content: str) -> Post:
    """
    Creates and returns a new Post instance in the database.

    Args:
        author_id: Primary key of the owning user.
        title: The title of the post.
        content: The content of the post.
    """
    return Post.objects.create(author_id=author_id, title=title, content=content)


def update_post_fields(post: Post, *, title: str, content: str) -> None:
    post.title = title
    post.content = content
    post.save(update_fields=["title", "content", "updated_at"])


def add_post_tags(post: Post, tags: Iterable[Tag]) -> None:
    PostTag.objects.bulk_create([PostTag(post=post, tag=tag) for tag in tags])


def replace_post_tags(post: Post, tags: Iterable[Tag]) -> None:
    """Drop every association of `post` and insert `tags` in its place."""
    PostTag.objects.filter(post=post).delete()
    add_post_tags(post, tags)


def delete_post(post: Post) -> None:
    post.delete()


def get_or_create_tag(name: str) -> tuple[Tag, bool]:
    """
    Looks a tag up by exact name, creating it when missing.

    `get_or_create` inserts inside a savepoint and falls back to a second
    lookup when the insert hits the unique constraint, so a concurrent
    creator of the same name yields the existing row instead of an error.
    """
    return Tag.objects.get_or_create(name=name)
