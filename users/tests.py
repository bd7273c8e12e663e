from urllib.parse import urlencode

from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient, APIRequestFactory, APITestCase

from activity_logs.models import Action, ActivityLog
from users.authentication import DEMO_OWNER_USER_ID, FixedOwnerAuthentication
from users.models import User
from users.permissions_matrix import (
    ACTIVITY_LOGS,
    ANALYTICS,
    OPERATIONAL_RESOURCES,
    OWNER,
    RESOURCES,
    ROLE_PERMISSIONS,
    ROLES,
    SUPERVISOR,
    can_read,
    can_write,
    has_permission,
    perm,
)
from users.session import resolve_session


class PermissionMatrixTests(SimpleTestCase):
    def all_tokens(self):
        return [perm(r, a) for r in RESOURCES for a in ("read", "write")]

    def test_unlisted_pairs_are_denied(self):
        for role in ROLES:
            for token in self.all_tokens():
                self.assertEqual(has_permission(role, token), token in ROLE_PERMISSIONS[role])

    def test_unknown_inputs_are_false(self):
        self.assertFalse(has_permission("JANITOR", "members:read"))
        self.assertFalse(has_permission(OWNER, "members:delete"))
        self.assertFalse(has_permission(None, None))
        self.assertFalse(has_permission(["OWNER"], "members:read"))

    def test_owner_is_strict_superset(self):
        others = set()
        for role in ROLES:
            if role != OWNER:
                others |= ROLE_PERMISSIONS[role]
        owner = ROLE_PERMISSIONS[OWNER]
        self.assertTrue(others < owner)
        self.assertEqual(owner - others, {perm(ANALYTICS, "read"), perm(ACTIVITY_LOGS, "read")})

    def test_supervisor_reads_everything_operational_and_writes_nothing(self):
        for resource in OPERATIONAL_RESOURCES:
            self.assertTrue(can_read(SUPERVISOR, resource))
            self.assertFalse(can_write(SUPERVISOR, resource))
        self.assertFalse(can_read(SUPERVISOR, ANALYTICS))
        self.assertFalse(can_read(SUPERVISOR, ACTIVITY_LOGS))

    def test_only_owner_reads_reports(self):
        for role in ROLES:
            expected = role == OWNER
            self.assertEqual(can_read(role, ANALYTICS), expected)
            self.assertEqual(can_read(role, ACTIVITY_LOGS), expected)

    def test_table_is_immutable(self):
        with self.assertRaises(TypeError):
            ROLE_PERMISSIONS[OWNER] = frozenset()
        self.assertIsInstance(ROLE_PERMISSIONS[OWNER], frozenset)


class SessionResolverTests(TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def test_fixed_owner_provider_creates_demo_owner(self):
        request = self.factory.get("/api/members/")
        user, _ = FixedOwnerAuthentication().authenticate(request)
        self.assertEqual(user.user_id, DEMO_OWNER_USER_ID)
        self.assertEqual(user.role, OWNER)
        self.assertFalse(user.has_usable_password())

        again, _ = FixedOwnerAuthentication().authenticate(request)
        self.assertEqual(again.pk, user.pk)
        self.assertEqual(User.objects.filter(user_id=DEMO_OWNER_USER_ID).count(), 1)

    def test_fixed_owner_provider_restores_owner_role(self):
        User.objects.create_user(DEMO_OWNER_USER_ID, "pw", full_name="Demo", role="FRONT_OFFICE", is_active=False)
        user, _ = FixedOwnerAuthentication().authenticate(self.factory.get("/api/members/"))
        self.assertEqual(user.role, OWNER)
        self.assertTrue(user.is_active)
        stored = User.objects.get(user_id=DEMO_OWNER_USER_ID)
        self.assertEqual(stored.role, OWNER)
        self.assertTrue(stored.is_active)

    def test_resolve_session_requires_authenticated_user(self):
        request = self.factory.get("/")
        self.assertIsNone(resolve_session(request))

        request.user = User.objects.create_user("fo1", "pw", full_name="Front", role="FRONT_OFFICE")
        session = resolve_session(request)
        self.assertEqual(session.user_id, "fo1")
        self.assertEqual(session.role, "FRONT_OFFICE")


class AuthApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(
            "owner", "password123", full_name="Gym Owner", email="owner@gym.com", role=OWNER
        )
        self.front = User.objects.create_user(
            "frontoffice", "password123", full_name="Front Office Staff", role="FRONT_OFFICE"
        )

    def test_login_by_email_issues_tokens_and_logs(self):
        res = self.client.post(
            "/api/users/token/", {"email": "owner@gym.com", "password": "password123"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.content)
        self.assertIn("access", res.data)
        self.assertEqual(res.data["role"], OWNER)
        self.assertIn("analytics:read", res.data["permissions"])

        log = ActivityLog.objects.get(action=Action.LOGIN)
        self.assertEqual(log.user, self.owner)
        self.assertEqual(log.entity, "User")
        self.assertEqual(log.details.get("ip_address"), "127.0.0.1")

        me = self.client.get("/api/users/me/", HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        self.assertEqual(me.status_code, status.HTTP_200_OK, me.content)
        self.assertEqual(me.data["user_id"], "owner")

    def test_form_encoded_login(self):
        res = self.client.post(
            "/api/users/token/",
            urlencode({"user_id": " frontoffice ", "password": "password123"}),
            content_type="application/x-www-form-urlencoded",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.content)
        self.assertEqual(res.data["user_id"], "frontoffice")
        self.assertTrue(ActivityLog.objects.filter(action=Action.LOGIN, user=self.front).exists())

        res = self.client.post(
            "/api/users/token/", {"email": "owner@gym.com", "password": "password123"}, format="multipart"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.content)
        self.assertEqual(res.data["role"], OWNER)

    def test_bad_password_is_rejected_without_log(self):
        res = self.client.post(
            "/api/users/token/", {"user_id": "owner", "password": "nope"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(ActivityLog.objects.exists())

    def test_inactive_user_token_is_refused(self):
        res = self.client.post(
            "/api/users/token/", {"user_id": "frontoffice", "password": "password123"}, format="json"
        )
        token = res.data["access"]
        self.front.is_active = False
        self.front.save()
        res = self.client.get("/api/members/", HTTP_AUTHORIZATION=f"Bearer {token}")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unauthenticated_is_401(self):
        res = self.client.get("/api/members/")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data, {"error": "Unauthenticated"})

    def test_forbidden_is_403_or_collapsed_401(self):
        self.client.force_authenticate(user=self.front)
        res = self.client.get("/api/campaigns/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        with override_settings(GYMDESK_COLLAPSE_AUTH_ERRORS=True):
            res = self.client.get("/api/campaigns/")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_roles_lists_permissions(self):
        self.client.force_authenticate(user=self.front)
        res = self.client.get("/api/users/roles/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        by_id = {row["id"]: row for row in res.data}
        self.assertEqual(set(by_id), set(ROLES))
        self.assertIn("members:write", by_id["FRONT_OFFICE"]["permissions"])

    def test_staff_directory_is_owner_only(self):
        self.client.force_authenticate(user=self.front)
        self.assertEqual(self.client.get("/api/users/").status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner)
        res = self.client.get("/api/users/", {"role": "FRONT_OFFICE"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([u["user_id"] for u in res.data], ["frontoffice"])


class HealthTests(TestCase):
    def test_health_without_trailing_slash(self):
        res = self.client.get("/api/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"status": "ok"})
