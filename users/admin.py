from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("user_id",)
    list_display = ("user_id", "full_name", "email", "role", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("user_id", "full_name", "email")
    readonly_fields = ("created_at", "last_login")
    fieldsets = (
        (None, {"fields": ("user_id", "password")}),
        ("Profile", {"fields": ("full_name", "email", "role")}),
        ("Flags", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Dates", {"fields": ("last_login", "created_at")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("user_id", "full_name", "email", "role", "password1", "password2")}),
    )
    filter_horizontal = ()
