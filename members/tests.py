import re
from datetime import datetime

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from activity_logs.models import Action, ActivityLog
from gymdesk.codes import generate_member_code, member_code_prefix, next_member_code
from members.models import Member, MemberAbsence
from transactions.models import MemberTransaction
from users.models import User


class MemberCodeFormatTests(SimpleTestCase):
    def test_prefix_uses_two_digit_year(self):
        now = timezone.make_aware(datetime(2024, 3, 1, 12, 0))
        self.assertEqual(member_code_prefix(now), "MEM24")

    def test_next_code(self):
        self.assertEqual(next_member_code(None, "MEM24"), "MEM240001")
        self.assertEqual(next_member_code("MEM240009", "MEM24"), "MEM240010")
        self.assertEqual(next_member_code("MEM249999", "MEM24"), "MEM2410000")


class MemberCodeSequenceTests(TestCase):
    def test_sequential_codes_increase_from_max(self):
        prefix = member_code_prefix()
        Member.objects.create(member_code=f"{prefix}0041", name="Existing")
        # other years do not count
        Member.objects.create(member_code="MEM000999", name="Old")

        codes = []
        for i in range(5):
            code = generate_member_code()
            Member.objects.create(member_code=code, name=f"Member {i}")
            codes.append(code)

        self.assertEqual(len(set(codes)), 5)
        suffixes = [int(c[len(prefix):]) for c in codes]
        self.assertEqual(suffixes, [42, 43, 44, 45, 46])


class MemberApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.front = User.objects.create_user("frontoffice", "pw", full_name="Front Office Staff", role="FRONT_OFFICE")
        self.supervisor = User.objects.create_user("supervisor", "pw", full_name="Supervisor", role="SUPERVISOR")
        self.client.force_authenticate(user=self.front)

    def test_create_member_generates_code_and_logs_once(self):
        before = ActivityLog.objects.filter(action=Action.CREATE_MEMBER).count()
        res = self.client.post("/api/members/", {"name": "John Doe", "email": "John@Example.com"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertRegex(res.data["member_code"], r"^MEM\d{2}\d{4}$")
        self.assertEqual(res.data["email"], "john@example.com")
        self.assertEqual(res.data["created_by_name"], "Front Office Staff")

        logs = ActivityLog.objects.filter(action=Action.CREATE_MEMBER)
        self.assertEqual(logs.count(), before + 1)
        log = logs.get()
        self.assertEqual(log.user, self.front)
        self.assertEqual(log.role, "FRONT_OFFICE")
        self.assertEqual(log.entity, "Member")
        self.assertEqual(log.entity_id, str(res.data["id"]))
        self.assertEqual(log.details, {"member_code": res.data["member_code"], "name": "John Doe"})

    def test_member_code_is_not_writable(self):
        res = self.client.post("/api/members/", {"name": "Jane", "member_code": "HACK"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(re.match(r"^MEM\d{6}$", res.data["member_code"]))

    def test_missing_name_is_422_and_not_logged(self):
        res = self.client.post("/api/members/", {"name": "  "}, format="json")
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn("name", res.data["fields"])
        self.assertFalse(ActivityLog.objects.exists())

    def test_update_logs_changes(self):
        member = Member.objects.create(member_code="MEM990001", name="John Doe")
        res = self.client.patch(f"/api/members/{member.pk}/", {"is_active": False}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.content)
        self.assertFalse(res.data["is_active"])
        log = ActivityLog.objects.get(action=Action.UPDATE_MEMBER)
        self.assertEqual(log.details, {"changes": {"is_active": False}})

    def test_delete_then_404_with_audit_row(self):
        member = Member.objects.create(member_code="MEM990002", name="Mike Johnson")
        res = self.client.delete(f"/api/members/{member.pk}/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data, {"success": True})

        res = self.client.get(f"/api/members/{member.pk}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

        log = ActivityLog.objects.get(action=Action.DELETE_MEMBER)
        self.assertEqual(log.entity_id, str(member.pk))
        self.assertEqual(log.details["member_code"], "MEM990002")

    def test_delete_member_with_payments_is_409(self):
        member = Member.objects.create(member_code="MEM990003", name="Payer")
        MemberTransaction.objects.create(
            transaction_code="TRX1", member=member, type="MEMBERSHIP_FEE",
            amount="10.00", due_date=timezone.localdate(),
        )
        res = self.client.delete(f"/api/members/{member.pk}/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Member.objects.filter(pk=member.pk).exists())
        self.assertFalse(ActivityLog.objects.filter(action=Action.DELETE_MEMBER).exists())

    def test_list_filters(self):
        Member.objects.create(member_code="MEM990004", name="Active Anna")
        Member.objects.create(member_code="MEM990005", name="Inactive Ivan", is_active=False)

        res = self.client.get("/api/members/", {"active": "true"})
        self.assertEqual([m["name"] for m in res.data], ["Active Anna"])

        res = self.client.get("/api/members/", {"search": "ivan"})
        self.assertEqual([m["name"] for m in res.data], ["Inactive Ivan"])

    def test_supervisor_reads_but_cannot_write(self):
        self.client.force_authenticate(user=self.supervisor)
        self.assertEqual(self.client.get("/api/members").status_code, status.HTTP_200_OK)
        res = self.client.post("/api/members/", {"name": "Nope"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Member.objects.exists())
        self.assertFalse(ActivityLog.objects.exists())


class MemberAbsenceApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.front = User.objects.create_user("frontoffice", "pw", full_name="Front", role="FRONT_OFFICE")
        self.client.force_authenticate(user=self.front)
        self.member = Member.objects.create(member_code="MEM990010", name="Jane Smith")

    def test_create_absence_returns_member_and_logs(self):
        res = self.client.post(
            "/api/member-absences/",
            {"member_id": self.member.pk, "date": "2024-05-02", "type": "SICK", "reason": "Flu"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertEqual(res.data["member"]["member_code"], "MEM990010")

        log = ActivityLog.objects.get(action=Action.CREATE_ABSENCE)
        self.assertEqual(log.entity, "MemberAbsence")
        self.assertEqual(log.details, {"member_id": self.member.pk, "date": "2024-05-02", "type": "SICK"})

    def test_filter_by_member(self):
        other = Member.objects.create(member_code="MEM990011", name="Other")
        MemberAbsence.objects.create(member=self.member, date="2024-05-01", type="SICK")
        MemberAbsence.objects.create(member=other, date="2024-05-01", type="VACATION")

        res = self.client.get("/api/member-absences/", {"member": self.member.pk})
        self.assertEqual(len(res.data), 1)
        self.assertEqual(res.data[0]["type"], "SICK")

    def test_unknown_member_is_422(self):
        res = self.client.post(
            "/api/member-absences/", {"member_id": 999999, "date": "2024-05-02", "type": "SICK"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
