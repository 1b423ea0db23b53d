from django.contrib import admin

from .models import OAuthAccount, User


class OAuthAccountInline(admin.TabularInline):
    model = OAuthAccount
    extra = 0
    readonly_fields = ["provider", "provider_account_id", "created_at"]


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    ordering = ["-date_joined"]
    list_display = ["email", "name", "is_active", "is_staff", "date_joined"]
    search_fields = ["email", "name"]
    readonly_fields = ["password", "last_login", "date_joined"]
    exclude = ["groups", "user_permissions"]
    inlines = [OAuthAccountInline]
