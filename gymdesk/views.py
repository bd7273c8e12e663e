# gymdesk/views.py
import logging

from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from analytics.services import dashboard_stats as compute_dashboard_stats
from users.session import resolve_session

logger = logging.getLogger(__name__)


def health(request):
    return JsonResponse({"status": "ok"})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """
    Dashboard tiles for any signed-in role. Each section (members, finance,
    marketing) is present only when the role can read that resource family.
    """
    session = resolve_session(request)
    stats = compute_dashboard_stats(session.role)
    logger.debug("dashboard stats for %s: %s", session.user_id, sorted(stats))
    return Response(stats)
