"""Base models shared across apps."""

from django.db import models


class TimestampedModel(models.Model):
    """Abstract base model with created/updated timestamps.

    Provides automatic timestamp tracking for all models.
    """

    created_at = models.DateTimeField(
        auto_now_add=True, help_text="Timestamp when the record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True, help_text="Timestamp when the record was last updated"
    )

    class Meta:
        abstract = True
