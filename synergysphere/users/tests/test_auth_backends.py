import pytest

from synergysphere.users.auth_backends import UsernameOrEmailBackend
from tests.factories import TEST_PASSWORD
from tests.factories import create_user

pytestmark = pytest.mark.django_db


class TestUsernameOrEmailBackend:
    def setup_method(self):
        self.backend = UsernameOrEmailBackend()
        self.user = create_user("Member@Example.com", name="Mia Member")

    def test_authenticate_with_email_case_insensitive(self):
        user = self.backend.authenticate(
            None,
            username="member@example.com",
            password=TEST_PASSWORD,
        )
        assert user == self.user

    def test_authenticate_with_email_kwarg(self):
        user = self.backend.authenticate(
            None,
            email="member@example.com",
            password=TEST_PASSWORD,
        )
        assert user == self.user

    def test_wrong_password(self):
        user = self.backend.authenticate(
            None,
            username="member@example.com",
            password="wrongpass",  # noqa: S106
        )
        assert user is None

    def test_unknown_email(self):
        user = self.backend.authenticate(
            None,
            username="nobody@example.com",
            password=TEST_PASSWORD,
        )
        assert user is None

    def test_inactive_user_rejected(self):
        self.user.is_active = False
        self.user.save()
        user = self.backend.authenticate(
            None,
            username="member@example.com",
            password=TEST_PASSWORD,
        )
        assert user is None
