from django.utils import timezone
from rest_framework import serializers

from gymdesk.fields import DateOrDateTimeField
from members.models import Member
from members.serializers import MemberMiniSerializer

from .models import CompanyTransaction, MemberTransaction


class MemberTransactionSerializer(serializers.ModelSerializer):
    member_id = serializers.PrimaryKeyRelatedField(
        queryset=Member.objects.all(),
        source="member",
        write_only=True,
    )
    # full member summary on reads
    member = MemberMiniSerializer(read_only=True)
    paid_date = DateOrDateTimeField(required=False, allow_null=True)
    created_by_name = serializers.ReadOnlyField(source="created_by.full_name")

    class Meta:
        model = MemberTransaction
        fields = [
            "id",
            "transaction_code",
            "member",      # read
            "member_id",   # write
            "type",
            "amount",
            "description",
            "payment_method",
            "status",
            "due_date",
            "paid_date",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "transaction_code", "created_by", "created_at", "updated_at"]
        extra_kwargs = {
            "description":    {"required": False, "allow_blank": True, "allow_null": True},
            "payment_method": {"required": False, "allow_blank": True, "allow_null": True},
        }

    def validate_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("Amount cannot be negative.")
        return value

    def validate(self, attrs):
        if attrs.get("payment_method") == "":
            attrs["payment_method"] = None

        status = attrs.get("status", getattr(self.instance, "status", MemberTransaction.Status.PENDING))
        paid_date = attrs.get("paid_date", getattr(self.instance, "paid_date", None))
        # completed without a payment stamp -> stamp it now
        if status == MemberTransaction.Status.COMPLETED and paid_date is None:
            attrs["paid_date"] = timezone.now()
        return attrs


class CompanyTransactionSerializer(serializers.ModelSerializer):
    transaction_date = DateOrDateTimeField(required=False)
    created_by_name = serializers.ReadOnlyField(source="created_by.full_name")

    class Meta:
        model = CompanyTransaction
        fields = [
            "id",
            "transaction_code",
            "type",
            "category",
            "amount",
            "description",
            "payment_method",
            "status",
            "transaction_date",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "transaction_code", "created_by", "created_at", "updated_at"]
        extra_kwargs = {
            "description":    {"required": False, "allow_blank": True, "allow_null": True},
            "payment_method": {"required": False, "allow_blank": True, "allow_null": True},
        }

    def validate_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("Amount cannot be negative.")
        return value

    def validate_category(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("Category is required.")
        return v

    def validate(self, attrs):
        if attrs.get("payment_method") == "":
            attrs["payment_method"] = None
        return attrs
