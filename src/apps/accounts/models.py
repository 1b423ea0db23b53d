"""User and linked OAuth account models."""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Manager for email-identified users."""

    use_in_migrations = True

    def create_user(self, email, name="", password=None, **extra_fields):
        """
        Create a user. Without a password the account gets an unusable one,
        which is how OAuth-only accounts are stored.
        """
        if not email:
            raise ValueError("Users must have an email address")
        user = self.model(email=self.normalize_email(email), name=name, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name="", password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(email, name=name, password=password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    A registered principal.

    `email` is the login identifier. `password` holds a salted hash, or an
    unusable marker for users who only ever signed in through a provider.
    """

    name = models.CharField(max_length=150, blank=True)
    email = models.EmailField(unique=True)
    image = models.URLField(max_length=500, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return self.name or self.email


class OAuthAccount(models.Model):
    """An external identity provider account linked to a user."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="oauth_accounts")
    provider = models.CharField(max_length=50)
    provider_account_id = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["provider", "provider_account_id"],
                name="uniq_oauth_provider_account",
            ),
        ]
        verbose_name = "OAuth Account"
        verbose_name_plural = "OAuth Accounts"

    def __str__(self):
        return f"{self.provider}:{self.provider_account_id}"
