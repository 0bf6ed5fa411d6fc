from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework.test import APIClient, APIRequestFactory

from permissions.roles import (
    CAP_FINANCE_RESET,
    CAP_LEDGER_POST,
    CAP_REPORTS_VIEW,
    HasCapability,
    HasWriteCapability,
    capabilities_for,
)

User = get_user_model()


class _View:
    def __init__(self, capability=None):
        self.required_capability = capability


class UserManagerTests(TestCase):
    def test_create_user_with_email(self):
        user = User.objects.create_user(email="Agent@Example.COM", password="pass")

        self.assertEqual(user.email, "Agent@example.com")
        self.assertEqual(user.username, "agent")
        self.assertEqual(user.role, User.ROLE_STAFF)
        self.assertTrue(user.check_password("pass"))

    def test_create_user_with_username_only(self):
        user = User.objects.create_user(username="clerk", password="pass")
        self.assertEqual(user.email, "clerk@local.test")

    def test_usernames_are_made_unique(self):
        first = User.objects.create_user(email="sam@one.com")
        second = User.objects.create_user(email="sam@two.com")

        self.assertEqual(first.username, "sam")
        self.assertNotEqual(second.username, "sam")
        self.assertFalse(second.has_usable_password())

    def test_create_superuser(self):
        admin = User.objects.create_superuser(email="root@example.com", password="pass")
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.is_staff)
        self.assertEqual(admin.role, User.ROLE_ADMIN)


class CapabilityTests(TestCase):
    """
    GUARANTEES:
    - Staff can run the office but not wipe finance data
    - Admin and superusers can do everything
    - Anonymous users denied everywhere
    """

    def setUp(self):
        self.factory = APIRequestFactory()
        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.staff = User.objects.create_user(email="staff@example.com", password="pass", role="staff")

    def _request(self, user, method="get"):
        request = getattr(self.factory, method)("/")
        request.user = user
        return request

    def test_capability_map(self):
        self.assertIn(CAP_FINANCE_RESET, capabilities_for(self.admin))
        self.assertNotIn(CAP_FINANCE_RESET, capabilities_for(self.staff))
        self.assertIn(CAP_LEDGER_POST, capabilities_for(self.staff))

    def test_has_capability(self):
        self.assertTrue(HasCapability().has_permission(self._request(self.staff), _View(CAP_REPORTS_VIEW)))
        self.assertFalse(HasCapability().has_permission(self._request(self.staff), _View(CAP_FINANCE_RESET)))
        self.assertFalse(HasCapability().has_permission(self._request(self.admin), _View(None)))

    def test_write_capability_reads_vs_writes(self):
        view = _View(CAP_FINANCE_RESET)

        self.assertTrue(HasWriteCapability().has_permission(self._request(self.staff), view))
        self.assertFalse(HasWriteCapability().has_permission(self._request(self.staff, "post"), view))
        self.assertTrue(HasWriteCapability().has_permission(self._request(self.admin, "post"), view))

    def test_anonymous_denied(self):
        request = self._request(None)
        self.assertFalse(HasCapability().has_permission(request, _View(CAP_REPORTS_VIEW)))
        self.assertFalse(HasWriteCapability().has_permission(request, _View(CAP_REPORTS_VIEW)))


class SeedUsersCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_users", "--password", "Secret123", stdout=out)
        call_command("seed_users", "--password", "Secret123", stdout=out)

        self.assertEqual(User.objects.count(), 3)
        admin = User.objects.get(email="admin@example.com")
        self.assertTrue(admin.is_superuser)
        self.assertEqual(User.objects.filter(role="staff").count(), 2)

    def test_short_password_rejected(self):
        with self.assertRaises(CommandError):
            call_command("seed_users", "--password", "123", stdout=StringIO())


class ProjectEndpointsTests(TestCase):
    def test_health_and_root_are_public(self):
        client = APIClient()

        res = client.get("/api/health/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["db"], "ok")

        res = client.get("/api/")
        self.assertEqual(res.status_code, 200)
        self.assertIn("invoices", res.data["modules"])

    def test_jwt_login(self):
        User.objects.create_user(email="jwt@example.com", password="pass1234")

        res = APIClient().post(
            "/api/auth/jwt/create/",
            {"email": "jwt@example.com", "password": "pass1234"},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)
        self.assertIn("access", res.data)
