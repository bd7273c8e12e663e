from django.contrib import admin

from .models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user", "role", "action", "entity", "entity_id")
    list_filter = ("action", "role", "entity")
    search_fields = ("user__user_id", "user__full_name", "entity_id")
    readonly_fields = ("user", "role", "action", "entity", "entity_id", "details", "timestamp")

    # append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
