from rest_framework import serializers

from .models import Member, MemberAbsence


class MemberMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Member
        fields = ["id", "member_code", "name", "email"]


class MemberSerializer(serializers.ModelSerializer):
    created_by_name = serializers.ReadOnlyField(source="created_by.full_name")

    class Meta:
        model = Member
        fields = [
            "id",
            "member_code",
            "name",
            "email",
            "phone",
            "address",
            "gender",
            "birth_date",
            "emergency_contact",
            "notes",
            "join_date",
            "is_active",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "member_code", "created_by", "created_at", "updated_at"]
        extra_kwargs = {
            "email":             {"required": False, "allow_blank": True, "allow_null": True},
            "phone":             {"required": False, "allow_blank": True, "allow_null": True},
            "address":           {"required": False, "allow_blank": True, "allow_null": True},
            "gender":            {"required": False, "allow_blank": True, "allow_null": True},
            "emergency_contact": {"required": False, "allow_blank": True, "allow_null": True},
            "notes":             {"required": False, "allow_blank": True, "allow_null": True},
        }

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("Name is required.")
        return v

    def validate(self, attrs):
        # blank optional strings are stored as NULL
        for f in ("email", "phone", "address", "gender", "emergency_contact", "notes"):
            if f in attrs and isinstance(attrs[f], str) and not attrs[f].strip():
                attrs[f] = None
        if attrs.get("email"):
            attrs["email"] = attrs["email"].strip().lower()
        return attrs


class MemberAbsenceSerializer(serializers.ModelSerializer):
    member_id = serializers.PrimaryKeyRelatedField(
        queryset=Member.objects.all(),
        source="member",
        write_only=True,
    )
    # full member summary on reads
    member = MemberMiniSerializer(read_only=True)

    class Meta:
        model = MemberAbsence
        fields = [
            "id",
            "member",      # read
            "member_id",   # write
            "date",
            "type",
            "reason",
            "created_by",
            "created_at",
        ]
        read_only_fields = ["id", "member", "created_by", "created_at"]
        extra_kwargs = {
            "reason": {"required": False, "allow_blank": True, "allow_null": True},
        }
