"""
Session providers.

Exactly one of these is installed in REST_FRAMEWORK["DEFAULT_AUTHENTICATION_CLASSES"],
chosen by GYMDESK_SKIP_AUTH when settings load.
"""
import logging

from rest_framework.authentication import BaseAuthentication
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

from .models import User
from .permissions_matrix import OWNER

logger = logging.getLogger(__name__)

DEMO_OWNER_USER_ID = "demo-owner-id"


class JWTSessionAuthentication(JWTAuthentication):
    """
    Bearer-token authentication resolving to an active staff User.
    """

    def get_user(self, validated_token):
        user_id = validated_token.get("user_id")
        if user_id is None:
            raise InvalidToken("Token contained no recognizable user identification")

        try:
            user = User.objects.get(user_id=user_id)
        except User.DoesNotExist:
            raise AuthenticationFailed("User not found", code="user_not_found")

        if not user.is_active:
            raise AuthenticationFailed("User is inactive", code="user_inactive")
        return user


class FixedOwnerAuthentication(BaseAuthentication):
    """
    Development-only provider: every request runs as the OWNER account
    `demo-owner-id`, created on first use. Real credentials are ignored.
    """

    def authenticate(self, request):
        user, created = User.objects.get_or_create(
            user_id=DEMO_OWNER_USER_ID,
            defaults={"full_name": "Demo Owner", "role": OWNER},
        )
        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            logger.warning("Created fixed identity %s for skip-auth mode", DEMO_OWNER_USER_ID)
        elif user.role != OWNER or not user.is_active:
            # skip-auth always runs as an active OWNER
            logger.warning("Restoring %s to an active %s account", DEMO_OWNER_USER_ID, OWNER)
            user.role = OWNER
            user.is_active = True
            user.save(update_fields=["role", "is_active"])
        return (user, None)

    def authenticate_header(self, request):
        return "Bearer"
