from rest_framework import serializers

from gymdesk.fields import DateOrDateTimeField

from .models import METRIC_KEYS, Campaign, CampaignLog


class CampaignMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Campaign
        fields = ["id", "name", "status"]


class CampaignSerializer(serializers.ModelSerializer):
    created_by_name = serializers.ReadOnlyField(source="created_by.full_name")
    log_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Campaign
        fields = [
            "id",
            "name",
            "description",
            "type",
            "status",
            "budget",
            "start_date",
            "end_date",
            "target_audience",
            "goals",
            "log_count",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]
        extra_kwargs = {
            "description":     {"required": False, "allow_blank": True, "allow_null": True},
            "budget":          {"required": False, "allow_null": True},
            "end_date":        {"required": False, "allow_null": True},
            "target_audience": {"required": False, "allow_blank": True, "allow_null": True},
            "goals":           {"required": False, "allow_blank": True, "allow_null": True},
        }

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("Name is required.")
        return v

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date cannot be before start date."})
        return attrs


class CampaignLogSerializer(serializers.ModelSerializer):
    campaign_id = serializers.PrimaryKeyRelatedField(
        queryset=Campaign.objects.all(),
        source="campaign",
        write_only=True,
    )
    campaign = CampaignMiniSerializer(read_only=True)
    log_date = DateOrDateTimeField(required=False)

    class Meta:
        model = CampaignLog
        fields = [
            "id",
            "campaign",
            "campaign_id",
            "activity",
            "description",
            "metrics",
            "log_date",
            "created_by",
            "created_at",
        ]
        read_only_fields = ["id", "campaign", "created_by", "created_at"]
        extra_kwargs = {
            "description": {"required": False, "allow_blank": True, "allow_null": True},
            "metrics":     {"required": False, "allow_null": True},
        }

    def validate_activity(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("Activity is required.")
        return v

    def validate_metrics(self, value):
        if value is None:
            return None
        if not isinstance(value, dict):
            raise serializers.ValidationError("Metrics must be an object.")
        for key in METRIC_KEYS:
            if key not in value:
                continue
            n = value[key]
            if isinstance(n, bool) or not isinstance(n, (int, float)) or n < 0:
                raise serializers.ValidationError({key: "Must be a non-negative number."})
        return value
