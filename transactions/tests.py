from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from activity_logs.models import Action, ActivityLog
from gymdesk.codes import create_with_code, generate_transaction_code
from gymdesk.exceptions import Conflict
from members.models import Member
from transactions.models import CompanyTransaction, MemberTransaction
from users.models import User


class TransactionCodeTests(TestCase):
    def test_format(self):
        code = generate_transaction_code()
        self.assertRegex(code, r"^TRX\d{11}$")
        self.assertRegex(generate_transaction_code("CTRX"), r"^CTRX\d{11}$")

    def test_collision_is_retried_then_conflict(self):
        member = Member.objects.create(member_code="MEM990100", name="Dup")
        MemberTransaction.objects.create(
            transaction_code="TRX00000000001", member=member, type="OTHER",
            amount=Decimal("1.00"), due_date=timezone.localdate(),
        )

        def save(**code):
            return MemberTransaction.objects.create(
                member=member, type="OTHER", amount=Decimal("1.00"),
                due_date=timezone.localdate(), **code,
            )

        codes = iter(["TRX00000000001", "TRX00000000002"])
        tx = create_with_code(save, lambda: next(codes), "transaction_code")
        self.assertEqual(tx.transaction_code, "TRX00000000002")

        with self.assertRaises(Conflict):
            create_with_code(save, lambda: "TRX00000000001", "transaction_code")


class MemberTransactionApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.front = User.objects.create_user("frontoffice", "pw", full_name="Front", role="FRONT_OFFICE")
        self.accounting = User.objects.create_user("accounting", "pw", full_name="Acc", role="ACCOUNTING")
        self.client.force_authenticate(user=self.front)
        self.member = Member.objects.create(member_code="MEM990200", name="John Doe")

    def _create(self, **extra):
        payload = {
            "member_id": self.member.pk,
            "type": "MEMBERSHIP_FEE",
            "amount": "50.00",
            "due_date": str(timezone.localdate()),
            "payment_method": "CASH",
        }
        payload.update(extra)
        return self.client.post("/api/member-transactions/", payload, format="json")

    def test_create_expands_member_and_logs(self):
        res = self._create()
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertRegex(res.data["transaction_code"], r"^TRX\d{11}$")
        self.assertEqual(res.data["status"], "PENDING")
        self.assertEqual(res.data["member"]["name"], "John Doe")
        self.assertIsNone(res.data["paid_date"])

        log = ActivityLog.objects.get(action=Action.CREATE_TRANSACTION)
        self.assertEqual(log.entity, "MemberTransaction")
        self.assertEqual(
            log.details,
            {
                "transaction_code": res.data["transaction_code"],
                "amount": "50.00",
                "type": "MEMBERSHIP_FEE",
                "member_code": "MEM990200",
            },
        )

    def test_negative_amount_is_422(self):
        res = self._create(amount="-1")
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertFalse(MemberTransaction.objects.exists())

    def test_completed_on_create_stamps_paid_date(self):
        res = self._create(status="COMPLETED")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertIsNotNone(res.data["paid_date"])

    def test_mark_paid_is_idempotent(self):
        tx_id = self._create().data["id"]

        res = self.client.patch(f"/api/member-transactions/{tx_id}/mark-paid/")
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.content)
        self.assertEqual(res.data["status"], "COMPLETED")
        first_paid = MemberTransaction.objects.get(pk=tx_id).paid_date
        self.assertIsNotNone(first_paid)

        res = self.client.patch(f"/api/member-transactions/{tx_id}/mark-paid")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "COMPLETED")
        self.assertEqual(MemberTransaction.objects.get(pk=tx_id).paid_date, first_paid)

        logs = ActivityLog.objects.filter(action=Action.MARK_TRANSACTION_PAID)
        self.assertEqual(logs.count(), 1)
        self.assertEqual(logs.get().entity_id, str(tx_id))

    def test_mark_paid_on_overdue(self):
        tx_id = self._create(status="OVERDUE").data["id"]
        res = self.client.patch(f"/api/member-transactions/{tx_id}/mark-paid/")
        self.assertEqual(res.data["status"], "COMPLETED")

    def test_mark_paid_on_cancelled_is_409(self):
        tx_id = self._create(status="CANCELLED").data["id"]
        res = self.client.patch(f"/api/member-transactions/{tx_id}/mark-paid/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(MemberTransaction.objects.get(pk=tx_id).status, "CANCELLED")
        self.assertFalse(ActivityLog.objects.filter(action=Action.MARK_TRANSACTION_PAID).exists())

    def test_mark_paid_needs_write(self):
        tx_id = self._create().data["id"]
        self.client.force_authenticate(user=self.accounting)
        res = self.client.patch(f"/api/member-transactions/{tx_id}/mark-paid/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_audit_failure_rolls_back_write(self):
        with mock.patch("activity_logs.pipeline.ActivityLog.objects.create", side_effect=IntegrityError("boom")):
            res = self._create()
        self.assertEqual(res.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(res.data, {"error": "Internal server error"})
        self.assertFalse(MemberTransaction.objects.exists())

    def test_filters(self):
        self._create()
        self._create(status="COMPLETED", type="PERSONAL_TRAINING")

        res = self.client.get("/api/member-transactions/", {"status": "COMPLETED"})
        self.assertEqual([t["type"] for t in res.data], ["PERSONAL_TRAINING"])

        res = self.client.get("/api/member-transactions/", {"member": self.member.pk, "type": "MEMBERSHIP_FEE"})
        self.assertEqual(len(res.data), 1)

    def test_delete_logs_code_and_amount(self):
        tx_id = self._create().data["id"]
        res = self.client.delete(f"/api/member-transactions/{tx_id}/")
        self.assertEqual(res.data, {"success": True})
        log = ActivityLog.objects.get(action=Action.DELETE_TRANSACTION)
        self.assertEqual(set(log.details), {"transaction_code", "amount", "type"})


class CompanyTransactionApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.accounting = User.objects.create_user("accounting", "pw", full_name="Acc", role="ACCOUNTING")
        self.client.force_authenticate(user=self.accounting)

    def test_create_with_plain_date(self):
        res = self.client.post(
            "/api/company-transactions/",
            {"type": "INCOME", "category": "Membership Fees", "amount": "5000", "transaction_date": "2024-06-01"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertRegex(res.data["transaction_code"], r"^CTRX\d{11}$")
        self.assertEqual(res.data["status"], "COMPLETED")

        tx = CompanyTransaction.objects.get()
        self.assertEqual(timezone.localtime(tx.transaction_date).date().isoformat(), "2024-06-01")

        log = ActivityLog.objects.get(action=Action.CREATE_TRANSACTION)
        self.assertEqual(log.entity, "CompanyTransaction")
        self.assertEqual(log.details["category"], "Membership Fees")

    def test_category_filter(self):
        now = timezone.now()
        for cat in ("Rent", "Equipment"):
            CompanyTransaction.objects.create(
                transaction_code=f"CTRX-{cat}", type="EXPENSE", category=cat,
                amount=Decimal("10"), transaction_date=now - timedelta(days=1),
            )
        res = self.client.get("/api/company-transactions/", {"category": "rent"})
        self.assertEqual([t["category"] for t in res.data], ["Rent"])

    def test_front_office_cannot_touch_company_ledger(self):
        front = User.objects.create_user("frontoffice", "pw", full_name="Front", role="FRONT_OFFICE")
        self.client.force_authenticate(user=front)
        self.assertEqual(self.client.get("/api/company-transactions/").status_code, status.HTTP_403_FORBIDDEN)
