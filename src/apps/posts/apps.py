"""Posts Django App Configuration."""

from django.apps import AppConfig


class PostsConfig(AppConfig):
    """Configuration for the posts app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.posts"
    label = "posts"
    verbose_name = "Posts"
