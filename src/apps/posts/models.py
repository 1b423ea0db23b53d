"""Post, Tag and the Post-Tag association."""

from typing import Optional

from django.conf import settings
from django.db import models
from django.db.models import Q

from apps.core.models import TimestampedModel

TAG_NAME_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 255


class Tag(models.Model):
    """
    A free-text label. Names are unique and case-sensitive; tags are created
    on first use and never removed when they fall out of use.
    """

    name = models.CharField(max_length=TAG_NAME_MAX_LENGTH, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Tag"
        verbose_name_plural = "Tags"

    def __str__(self) -> str:
        return self.name


class PostQuerySet(models.QuerySet):
    def hydrated(self) -> "PostQuerySet":
        """Join the author and prefetch tags so serialisation costs two queries."""
        return self.select_related("author").prefetch_related("tags")

    def newest_first(self) -> "PostQuerySet":
        return self.order_by("-id")

    def search(self, query: Optional[str]) -> "PostQuerySet":
        """
        Case-insensitive substring match on title, content or any tag name.

        The tag match goes through a subquery on the association table so a
        post with several matching tags is still returned once.
        """
        if not query:
            return self
        tagged = PostTag.objects.filter(tag__name__icontains=query).values("post_id")
        return self.filter(
            Q(title__icontains=query) | Q(content__icontains=query) | Q(id__in=tagged)
        )


class Post(TimestampedModel):
    """
    A blog post written by one user.

    Only the author may change or delete it. Deleting a post removes its
    tag associations but leaves the tags themselves.
    """

    title = models.CharField(max_length=TITLE_MAX_LENGTH, help_text="The title of the post.")
    content = models.TextField(help_text="The main content of the post.")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
        help_text="The user who authored the post.",
    )
    tags = models.ManyToManyField(Tag, through="PostTag", related_name="posts", blank=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        verbose_name = "Post"
        verbose_name_plural = "Posts"
        ordering = ["-id"]

    def __str__(self) -> str:
        return self.title


class PostTag(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="post_tags")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="post_tags")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["post", "tag"], name="uniq_post_tag"),
        ]
        verbose_name = "Post Tag"
        verbose_name_plural = "Post Tags"

    def __str__(self) -> str:
        return f"{self.post_id}:{self.tag_id}"
