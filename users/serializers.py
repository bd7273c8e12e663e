# users/serializers.py
from rest_framework import serializers
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import User
from .permissions_matrix import permissions_for


# Lightweight user serializer for dropdowns / "created by" columns
class UserLiteSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "user_id", "full_name", "email", "role"]


class GymTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Accepts {user_id, password} or {email, password}.
    Inactive accounts are rejected by the parent class.
    """
    username_field = "user_id"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields[self.username_field].required = False
        # CharField so non-email text in email field doesn't blow up validation
        self.fields["email"] = serializers.CharField(required=False, allow_blank=True)

    def _coerce_credentials(self):
        # QueryDict.get returns the last value, so form posts read like JSON ones
        incoming = self.initial_data or {}

        candidate = str(incoming.get("user_id") or "").strip()

        if not candidate:
            raw = str(incoming.get("email") or "").strip()
            if raw and "@" in raw:
                match = User.objects.filter(email__iexact=raw).values_list("user_id", flat=True).first()
                # No such email; let auth fail cleanly with the raw text
                candidate = match or raw
            else:
                candidate = raw

        if not candidate:
            raise ValidationError({self.username_field: "This field is required."})

        password = incoming.get("password")
        if not password:
            raise ValidationError({"password": "This field is required."})

        return {self.username_field: candidate, "password": password}

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["full_name"] = user.full_name
        return token

    def validate(self, attrs):
        data = super().validate(self._coerce_credentials())
        data["user_id"] = self.user.user_id
        data["full_name"] = self.user.full_name
        data["role"] = self.user.role
        data["permissions"] = permissions_for(self.user.role)
        return data
