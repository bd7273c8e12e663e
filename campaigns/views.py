from django.db.models import Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters
from rest_framework.permissions import IsAuthenticated

from activity_logs.models import Action
from activity_logs.pipeline import AuditedModelViewSet
from users.permissions_matrix import CAMPAIGN_LOGS, CAMPAIGNS
from users.permissions_matrix_guard import RoleActionPermission

from .filters import CampaignFilter, CampaignLogFilter
from .models import Campaign, CampaignLog
from .serializers import CampaignLogSerializer, CampaignSerializer

PermCampaigns = RoleActionPermission.for_module(CAMPAIGNS)
PermCampaignLogs = RoleActionPermission.for_module(CAMPAIGN_LOGS)


class CampaignViewSet(AuditedModelViewSet):
    serializer_class = CampaignSerializer
    permission_classes = [IsAuthenticated, PermCampaigns]

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = CampaignFilter
    search_fields = ["name", "description", "target_audience"]
    ordering_fields = ["created_at", "start_date", "end_date", "budget", "name"]
    ordering = ["-created_at", "-id"]

    audit_entity = "Campaign"
    audit_actions = {
        "create": Action.CREATE_CAMPAIGN,
        "update": Action.UPDATE_CAMPAIGN,
        "delete": Action.DELETE_CAMPAIGN,
    }

    def get_queryset(self):
        return (
            Campaign.objects.select_related("created_by")
            .annotate(log_count=Count("logs"))
            .order_by(*self.ordering)
        )

    def audit_details(self, verb, instance):
        if verb == "delete":
            return {"name": instance.name}
        return {"name": instance.name, "type": instance.type, "status": instance.status}


class CampaignLogViewSet(AuditedModelViewSet):
    serializer_class = CampaignLogSerializer
    permission_classes = [IsAuthenticated, PermCampaignLogs]

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = CampaignLogFilter
    search_fields = ["activity", "description", "campaign__name"]
    ordering_fields = ["log_date", "created_at"]
    ordering = ["-log_date", "-id"]

    audit_entity = "CampaignLog"
    audit_actions = {
        "create": Action.CREATE_MK_LOG,
        "update": Action.UPDATE_MK_LOG,
        "delete": Action.DELETE_MK_LOG,
    }

    def get_queryset(self):
        return CampaignLog.objects.select_related("campaign", "created_by").order_by(*self.ordering)

    def audit_details(self, verb, instance):
        if verb == "delete":
            return {"activity": instance.activity}
        return {"campaign_id": instance.campaign_id, "activity": instance.activity}
