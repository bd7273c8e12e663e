from rest_framework import serializers

from .models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    # actor's login id, matching the ?userId= filter
    user_id = serializers.ReadOnlyField(source="user.user_id")
    user_name = serializers.ReadOnlyField(source="user.full_name")
    user_email = serializers.ReadOnlyField(source="user.email")

    class Meta:
        model = ActivityLog
        fields = [
            "id",
            "user_id",
            "user_name",
            "user_email",
            "role",
            "action",
            "entity",
            "entity_id",
            "details",
            "timestamp",
        ]
        read_only_fields = fields
