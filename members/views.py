from rest_framework import filters
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend

from activity_logs.models import Action
from activity_logs.pipeline import AuditedModelViewSet
from gymdesk.codes import create_with_code, generate_member_code
from users.permissions_matrix import MEMBER_ABSENCES, MEMBERS
from users.permissions_matrix_guard import RoleActionPermission

from .filters import MemberAbsenceFilter, MemberFilter
from .models import Member, MemberAbsence
from .serializers import MemberAbsenceSerializer, MemberSerializer

PermMembers = RoleActionPermission.for_module(MEMBERS)
PermAbsences = RoleActionPermission.for_module(MEMBER_ABSENCES)


class MemberViewSet(AuditedModelViewSet):
    serializer_class = MemberSerializer
    permission_classes = [IsAuthenticated, PermMembers]

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = MemberFilter
    search_fields = ["member_code", "name", "email", "phone"]
    ordering_fields = ["created_at", "name", "member_code", "join_date"]
    ordering = ["-created_at", "-id"]

    audit_entity = "Member"
    audit_actions = {
        "create": Action.CREATE_MEMBER,
        "update": Action.UPDATE_MEMBER,
        "delete": Action.DELETE_MEMBER,
    }

    def get_queryset(self):
        return Member.objects.select_related("created_by").order_by(*self.ordering)

    def save_new(self, serializer):
        user = self.request.user
        return create_with_code(
            lambda **code: serializer.save(created_by=user, **code),
            generate_member_code,
            "member_code",
        )

    def audit_details(self, verb, instance):
        return {"member_code": instance.member_code, "name": instance.name}


class MemberAbsenceViewSet(AuditedModelViewSet):
    serializer_class = MemberAbsenceSerializer
    permission_classes = [IsAuthenticated, PermAbsences]

    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = MemberAbsenceFilter
    ordering_fields = ["date", "created_at"]
    ordering = ["-date", "-id"]

    audit_entity = "MemberAbsence"
    audit_actions = {
        "create": Action.CREATE_ABSENCE,
        "update": Action.UPDATE_ABSENCE,
        "delete": Action.DELETE_ABSENCE,
    }

    def get_queryset(self):
        return MemberAbsence.objects.select_related("member").order_by(*self.ordering)

    def audit_details(self, verb, instance):
        return {"member_id": instance.member_id, "date": instance.date, "type": instance.type}
