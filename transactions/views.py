
from django.db import transaction
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from activity_logs.models import Action
from activity_logs.pipeline import AuditedModelViewSet, run_audited
from gymdesk.codes import (
    COMPANY_TRANSACTION_PREFIX,
    TRANSACTION_PREFIX,
    create_with_code,
    generate_transaction_code,
)
from gymdesk.exceptions import Conflict
from users.permissions_matrix import COMPANY_TRANSACTIONS, MEMBER_TRANSACTIONS
from users.permissions_matrix_guard import RoleActionPermission

from .filters import CompanyTransactionFilter, MemberTransactionFilter
from .models import CompanyTransaction, MemberTransaction
from .serializers import CompanyTransactionSerializer, MemberTransactionSerializer


PermMemberTx = RoleActionPermission.for_module(MEMBER_TRANSACTIONS)
PermCompanyTx = RoleActionPermission.for_module(COMPANY_TRANSACTIONS)


class MemberTransactionViewSet(AuditedModelViewSet):
    serializer_class = MemberTransactionSerializer
    permission_classes = [IsAuthenticated, PermMemberTx]

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = MemberTransactionFilter
    search_fields = ["transaction_code", "member__name", "member__member_code", "description"]
    ordering_fields = ["created_at", "due_date", "paid_date", "amount"]
    ordering = ["-created_at", "-id"]

    audit_entity = "MemberTransaction"
    audit_actions = {
        "create": Action.CREATE_TRANSACTION,
        "update": Action.UPDATE_TRANSACTION,
        "delete": Action.DELETE_TRANSACTION,
    }

    def get_queryset(self):
        return MemberTransaction.objects.select_related("member", "created_by").order_by(*self.ordering)

    def save_new(self, serializer):
        user = self.request.user
        return create_with_code(
            lambda **code: serializer.save(created_by=user, **code),
            lambda: generate_transaction_code(TRANSACTION_PREFIX),
            "transaction_code",
        )

    def audit_details(self, verb, instance):
        details = {
            "transaction_code": instance.transaction_code,
            "amount": instance.amount,
            "type": instance.type,
        }
        if verb == "create":
            details["member_code"] = instance.member.member_code
        return details

    @action(
        detail=True,
        methods=["patch"],
        url_path="mark-paid",
        permission_classes=[IsAuthenticated, PermMemberTx.action("write")],
    )
    def mark_paid(self, request, pk=None):
        """
        PATCH /api/member-transactions/{id}/mark-paid/

        Sets status COMPLETED and stamps paid_date. Repeating the call on a
        completed transaction returns it unchanged and writes no log row.
        """
        tx = self.get_object()

        with transaction.atomic():
            # lock the row so concurrent calls stamp it once
            tx = MemberTransaction.objects.select_for_update().get(pk=tx.pk)
            if tx.status == MemberTransaction.Status.COMPLETED:
                return Response(self.get_serializer(self.refetch(tx)).data)
            if tx.status == MemberTransaction.Status.CANCELLED:
                raise Conflict("A cancelled transaction cannot be marked as paid.")

            def _mark():
                tx.status = MemberTransaction.Status.COMPLETED
                tx.paid_date = timezone.now()
                tx.save(update_fields=["status", "paid_date", "updated_at"])
                return tx

            run_audited(
                request,
                Action.MARK_TRANSACTION_PAID,
                self.audit_entity,
                _mark,
                lambda t: {"transaction_code": t.transaction_code, "paid_date": t.paid_date},
            )
        return Response(self.get_serializer(self.refetch(tx)).data)


class CompanyTransactionViewSet(AuditedModelViewSet):
    serializer_class = CompanyTransactionSerializer
    permission_classes = [IsAuthenticated, PermCompanyTx]

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = CompanyTransactionFilter
    search_fields = ["transaction_code", "category", "description"]
    ordering_fields = ["transaction_date", "amount", "created_at"]
    ordering = ["-transaction_date", "-id"]

    audit_entity = "CompanyTransaction"
    audit_actions = {
        "create": Action.CREATE_TRANSACTION,
        "update": Action.UPDATE_TRANSACTION,
        "delete": Action.DELETE_TRANSACTION,
    }

    def get_queryset(self):
        return CompanyTransaction.objects.select_related("created_by").order_by(*self.ordering)

    def save_new(self, serializer):
        user = self.request.user
        return create_with_code(
            lambda **code: serializer.save(created_by=user, **code),
            lambda: generate_transaction_code(COMPANY_TRANSACTION_PREFIX),
            "transaction_code",
        )

    def audit_details(self, verb, instance):
        details = {
            "transaction_code": instance.transaction_code,
            "amount": instance.amount,
            "type": instance.type,
        }
        if verb == "create":
            details["category"] = instance.category
        return details
