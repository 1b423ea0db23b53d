"""API views for posts."""

from typing import Any

from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from . import services
from .serializers import (
    DeleteResultSerializer,
    PostCountSerializer,
    PostPageQuerySerializer,
    PostPageSerializer,
    PostSerializer,
    PostWriteSerializer,
)

POST_EXAMPLE = OpenApiExample(
    "Post with tags",
    value={
        "title": "Cursor pagination in practice",
        "content": "Fetch one row more than you need...",
        "tags": ["django", "pagination"],
    },
    request_only=True,
)


@extend_schema(tags=["Posts"])
class PostViewSet(viewsets.ViewSet):  # type: ignore[misc]
    """
    API endpoint for posts.

    - `list`: One page of the feed, optionally filtered by `q`.
    - `all`: Every post, unpaginated.
    - `count`: Total number of posts.
    - `create`: Creates a post owned by the current user.
    - `retrieve`: A single post with author and tags.
    - `update`: Replaces title, content and tags. Author only.
    - `destroy`: Deletes the post. Author only.

    Requests by anyone but the author are answered like requests for a
    post that does not exist.
    """

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    lookup_value_regex = r"[0-9]+"

    @extend_schema(
        summary="List posts (cursor-paginated)",
        parameters=[
            OpenApiParameter("limit", int, description="Page size."),
            OpenApiParameter("cursor", int, description="`next_cursor` of the previous page."),
            OpenApiParameter("q", str, description="Search title, content and tag names."),
        ],
        responses={200: PostPageSerializer},
    )
    def list(self, request: Any) -> Response:
        query = PostPageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = services.get_posts_paginated(
            limit=query.validated_data.get("limit"),
            cursor=query.validated_data.get("cursor"),
            search_query=query.validated_data.get("q"),
        )
        return Response(PostPageSerializer(page).data)

    @extend_schema(summary="List all posts", responses={200: PostSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="all", url_name="all")
    def all_posts(self, request: Any) -> Response:
        return Response(PostSerializer(services.get_posts(), many=True).data)

    @extend_schema(summary="Count posts", responses={200: PostCountSerializer})
    @action(detail=False, methods=["get"])
    def count(self, request: Any) -> Response:
        return Response(PostCountSerializer({"count": services.count_posts()}).data)

    @extend_schema(
        summary="Create a post",
        request=PostWriteSerializer,
        responses={201: PostSerializer},
        examples=[POST_EXAMPLE],
    )
    def create(self, request: Any) -> Response:
        serializer = PostWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = services.create_post(
            owner_id=request.user.pk,
            title=serializer.validated_data["title"],
            content=serializer.validated_data["content"],
            tag_names=serializer.validated_data["tags"],
        )
        return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary="Retrieve a post", responses={200: PostSerializer})
    def retrieve(self, request: Any, pk: str) -> Response:
        post = services.get_post(post_id=int(pk))
        return Response(PostSerializer(post).data)

    @extend_schema(
        summary="Update a post",
        request=PostWriteSerializer,
        responses={200: PostSerializer},
        examples=[POST_EXAMPLE],
    )
    def update(self, request: Any, pk: str) -> Response:
        serializer = PostWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = services.update_post(
            post_id=int(pk),
            acting_user_id=request.user.pk,
            title=serializer.validated_data["title"],
            content=serializer.validated_data["content"],
            tag_names=serializer.validated_data["tags"],
        )
        return Response(PostSerializer(post).data)

    @extend_schema(summary="Delete a post", responses={200: DeleteResultSerializer})
    def destroy(self, request: Any, pk: str) -> Response:
        result = services.delete_post(post_id=int(pk), acting_user_id=request.user.pk)
        return Response(DeleteResultSerializer(result).data)
