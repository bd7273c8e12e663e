from django.db import transaction
from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView

from activity_logs.details import build_details
from activity_logs.models import Action
from activity_logs.pipeline import record_activity

from .models import User
from .permissions_matrix import ACTIVITY_LOGS, READ, ROLE_CHOICES, permissions_for
from .permissions_matrix_guard import RoleActionPermission
from .serializers import GymTokenObtainPairSerializer, UserLiteSerializer
from .session import resolve_session


def _client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


class GymTokenObtainPairView(TokenObtainPairView):
    """
    POST /api/users/token/  {user_id|email, password}

    Issues the JWT pair and appends a LOGIN row to the activity trail.
    """

    serializer_class = GymTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])

        user = serializer.user
        with transaction.atomic():
            record_activity(
                user,
                Action.LOGIN,
                "User",
                user.pk,
                build_details(Action.LOGIN, ip_address=_client_ip(request)),
            )
        return Response(serializer.validated_data)


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Staff directory (read-only). Accounts are provisioned by an administrator
    or `manage.py seed_demo`, not through the API.

    The list backs the "who" filter of the activity trail, so it shares that
    family's permission.
    """

    serializer_class = UserLiteSerializer
    permission_classes = [IsAuthenticated, RoleActionPermission.for_module(ACTIVITY_LOGS, op=READ)]

    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["role", "is_active"]
    ordering_fields = ["created_at", "full_name", "user_id"]
    ordering = ["full_name", "user_id"]

    def get_queryset(self):
        qs = User.objects.all().order_by(*self.ordering)
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(full_name__icontains=q) | Q(user_id__icontains=q) | Q(email__icontains=q)
            )
        return qs

    @action(detail=False, methods=["get"], url_path="roles", permission_classes=[IsAuthenticated])
    def roles(self, request):
        data = [
            {"id": key, "name": label, "permissions": permissions_for(key)}
            for key, label in ROLE_CHOICES
        ]
        return Response(data)

    @action(detail=False, methods=["get"], url_path="me", permission_classes=[IsAuthenticated])
    def me(self, request):
        session = resolve_session(request)
        return Response(
            {
                "user_id": session.user_id,
                "full_name": request.user.full_name,
                "email": request.user.email,
                "role": session.role,
                "permissions": permissions_for(session.role),
            }
        )
