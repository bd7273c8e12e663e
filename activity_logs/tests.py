from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from activity_logs.details import build_details
from activity_logs.models import Action, ActivityLog, AppendOnlyError
from activity_logs.pipeline import record_activity
from users.models import User


class BuildDetailsTests(SimpleTestCase):
    def test_known_variant(self):
        self.assertEqual(
            build_details(Action.CREATE_MEMBER, member_code="MEM240001", name="John Doe"),
            {"member_code": "MEM240001", "name": "John Doe"},
        )

    def test_optional_keys_are_dropped_when_missing(self):
        self.assertEqual(
            build_details(Action.DELETE_CAMPAIGN, name="Summer"),
            {"name": "Summer"},
        )

    def test_unknown_key_rejected(self):
        with self.assertRaises(ValueError):
            build_details(Action.DELETE_MEMBER, member_code="MEM240001", name="X", extra=1)

    def test_missing_key_rejected(self):
        with self.assertRaises(ValueError):
            build_details(Action.CREATE_MEMBER, name="John Doe")

    def test_unknown_action_rejected(self):
        with self.assertRaises(ValueError):
            build_details("DANCE", name="x")


class AppendOnlyTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user("owner", "pw", full_name="Owner", role="OWNER")
        self.log = record_activity(self.user, Action.LOGIN, "User", self.user.pk, {})

    def test_role_snapshot(self):
        self.assertEqual(self.log.role, "OWNER")
        self.assertEqual(self.log.entity_id, str(self.user.pk))

    def test_rows_cannot_change(self):
        self.log.entity = "Other"
        with self.assertRaises(AppendOnlyError):
            self.log.save()
        with self.assertRaises(AppendOnlyError):
            self.log.delete()
        with self.assertRaises(AppendOnlyError):
            ActivityLog.objects.filter(pk=self.log.pk).update(entity="Other")
        with self.assertRaises(AppendOnlyError):
            ActivityLog.objects.all().delete()
        self.assertEqual(ActivityLog.objects.get(pk=self.log.pk).entity, "User")


class ActivityLogApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user("owner", "pw", full_name="Gym Owner", role="OWNER")
        self.front = User.objects.create_user("frontoffice", "pw", full_name="Front", role="FRONT_OFFICE")
        record_activity(self.front, Action.CREATE_MEMBER, "Member", 1, {"member_code": "MEM240001", "name": "A"})
        record_activity(self.front, Action.DELETE_MEMBER, "Member", 1, {"member_code": "MEM240001", "name": "A"})
        record_activity(self.owner, Action.LOGIN, "User", self.owner.pk, {})
        self.client.force_authenticate(user=self.owner)

    def test_newest_first(self):
        res = self.client.get("/api/activity-logs/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([row["action"] for row in res.data], ["LOGIN", "DELETE_MEMBER", "CREATE_MEMBER"])
        self.assertEqual(res.data[0]["user_id"], "owner")

    def test_filters_and_all(self):
        res = self.client.get("/api/activity-logs", {"userId": "frontoffice", "action": "all"})
        self.assertEqual(len(res.data), 2)

        res = self.client.get("/api/activity-logs/", {"userId": "frontoffice", "action": "delete_member"})
        self.assertEqual([row["action"] for row in res.data], ["DELETE_MEMBER"])

        res = self.client.get("/api/activity-logs/", {"userId": str(self.owner.pk)})
        self.assertEqual([row["action"] for row in res.data], ["LOGIN"])

    @override_settings(GYMDESK_ACTIVITY_LOG_LIMIT=2)
    def test_capped(self):
        res = self.client.get("/api/activity-logs/")
        self.assertEqual(len(res.data), 2)

    def test_owner_only_and_read_only(self):
        # no write permission exists for the trail, even for OWNER
        res = self.client.post("/api/activity-logs/", {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(ActivityLog.objects.count(), 3)

        supervisor = User.objects.create_user("supervisor", "pw", full_name="Sup", role="SUPERVISOR")
        self.client.force_authenticate(user=supervisor)
        self.assertEqual(self.client.get("/api/activity-logs/").status_code, status.HTTP_403_FORBIDDEN)
