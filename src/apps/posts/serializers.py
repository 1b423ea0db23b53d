"""
Serializers for the posts API.

Read serializers render hydrated posts; write serializers only check the
shape of incoming data. Tag trimming and de-duplication happen in
`apps.posts.tags`.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import TITLE_MAX_LENGTH, Post, Tag

User = get_user_model()


class AuthorSummarySerializer(serializers.ModelSerializer):  # type: ignore[misc]
    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class TagSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    class Meta:
        model = Tag
        fields = ["id", "name"]
        read_only_fields = fields


class PostSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    """
    A post with its author summary and tag list.

    Expects a queryset from `Post.objects.hydrated()` so author and tags
    are already loaded.
    """

    author = AuthorSummarySerializer(read_only=True)
    tags = TagSerializer(many=True, read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "content",
            "author",
            "tags",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PostWriteSerializer(serializers.Serializer):  # type: ignore[misc]
    """Payload for creating or replacing a post."""

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    content = serializers.CharField(trim_whitespace=False)
    tags = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        required=False,
        default=list,
    )

    def validate_content(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.")
        return value


class PostPageQuerySerializer(serializers.Serializer):  # type: ignore[misc]
    """Query parameters of the paginated feed."""

    limit = serializers.IntegerField(min_value=1, required=False)
    cursor = serializers.IntegerField(min_value=1, required=False)
    q = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class PostPageSerializer(serializers.Serializer):  # type: ignore[misc]
    items = PostSerializer(many=True, read_only=True)
    next_cursor = serializers.IntegerField(read_only=True, allow_null=True)
    has_next_page = serializers.BooleanField(read_only=True)


class PostCountSerializer(serializers.Serializer):  # type: ignore[misc]
    count = serializers.IntegerField(read_only=True)


class DeleteResultSerializer(serializers.Serializer):  # type: ignore[misc]
    success = serializers.BooleanField(read_only=True)
