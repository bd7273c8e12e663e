# analytics/views.py
from django.utils.dateparse import parse_date
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from gymdesk.exceptions import UnprocessableEntity
from users.permissions_matrix import ANALYTICS, READ
from users.permissions_matrix_guard import RoleActionPermission

from .services import DEFAULT_RANGE, analytics_report, get_date_range


def _date_param(request, name):
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return None
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise UnprocessableEntity(f"{name} must be a date (YYYY-MM-DD).")
    return value


class AnalyticsView(APIView):
    """
    GET /api/analytics/?range=last7days|last30days|last90days|last12months
    GET /api/analytics/?start=YYYY-MM-DD&end=YYYY-MM-DD

    Member, revenue, trend and campaign aggregates for one date range.
    """

    permission_classes = [IsAuthenticated, RoleActionPermission.for_module(ANALYTICS, op=READ)]

    def get(self, request):
        preset = request.query_params.get("range") or DEFAULT_RANGE
        start = _date_param(request, "start")
        end = _date_param(request, "end")
        if end is not None and start is None:
            raise UnprocessableEntity("end requires start.")
        try:
            rng = get_date_range(preset, start=start, end=end)
        except ValueError as exc:
            raise UnprocessableEntity(str(exc))
        return Response(analytics_report(rng))
