from django.conf import settings
from django.db.models import Q
from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated

from users.permissions_matrix import ACTIVITY_LOGS
from users.permissions_matrix_guard import RoleActionPermission

from .models import ActivityLog
from .serializers import ActivityLogSerializer

PermActivityLogs = RoleActionPermission.for_module(ACTIVITY_LOGS)


def _param(request, *names):
    """First non-empty query param among `names`; 'all' means no filter."""
    for name in names:
        value = (request.query_params.get(name) or "").strip()
        if value and value.lower() != "all":
            return value
    return None


class ActivityLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Staff activity trail (read-only, newest first).

    Filters:
      ?userId=<user_id or numeric pk>
      ?action=<ACTION>
      ?entity=<Entity>&entityId=<id>
    """
    serializer_class = ActivityLogSerializer
    permission_classes = [IsAuthenticated, PermActivityLogs]
    filter_backends = []
    pagination_class = None

    def get_queryset(self):
        qs = ActivityLog.objects.select_related("user").order_by("-timestamp", "-id")
        request = self.request

        user_id = _param(request, "userId", "user_id")
        if user_id:
            cond = Q(user__user_id=user_id)
            if user_id.isdigit():
                cond |= Q(user__pk=int(user_id))
            qs = qs.filter(cond)

        action = _param(request, "action")
        if action:
            qs = qs.filter(action=action.upper())

        entity = _param(request, "entity")
        if entity:
            qs = qs.filter(entity=entity)

        entity_id = _param(request, "entityId", "entity_id")
        if entity_id:
            qs = qs.filter(entity_id=entity_id)

        limit = getattr(settings, "GYMDESK_ACTIVITY_LOG_LIMIT", 500)
        return qs[:limit]
