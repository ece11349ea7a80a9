import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APIClient

from src.apartments.factories import UserFactory, AdminUserFactory

PASSWORD = "Str0ng-Passphrase!"


@pytest.fixture
def client():
    return APIClient()


@pytest.mark.django_db
class TestRegister:
    url = reverse("users:register")

    def test_register_creates_regular_user_and_sets_cookies(self, client):
        resp = client.post(self.url, {
            "email": "New.Guest@Example.com", "password": PASSWORD,
            "firstName": "New", "lastName": "Guest", "phoneNumber": "+923001112233",
        }, format="json")
        assert resp.status_code == 201, resp.data
        assert resp.data["user"]["email"] == "new.guest@example.com"
        assert resp.data["user"]["isAdmin"] is False
        assert resp.cookies["access_token"]["httponly"]
        assert resp.cookies["refresh_token"].value == resp.data["refresh"]

        user = get_user_model().objects.get(email="new.guest@example.com")
        assert not user.is_staff
        assert user.phone_number == "+923001112233"

    def test_duplicate_email_is_case_insensitive(self, client):
        UserFactory(email="taken@example.com")
        resp = client.post(self.url, {"email": "TAKEN@example.com", "password": PASSWORD}, format="json")
        assert resp.status_code == 400
        assert "email" in resp.data

    def test_weak_password(self, client):
        resp = client.post(self.url, {"email": "weak@example.com", "password": "123"}, format="json")
        assert resp.status_code == 400
        assert "password" in resp.data


@pytest.mark.django_db
class TestLoginAndSession:
    def setup_method(self):
        self.user = UserFactory(email="guest@example.com", password=PASSWORD, first_name="Ayesha")

    def test_login_with_wrong_password(self, client):
        resp = client.post(reverse("users:login"), {"email": "guest@example.com", "password": "nope"}, format="json")
        assert resp.status_code == 401
        assert resp.data == {"detail": "Invalid credentials"}

    def test_login_email_is_case_insensitive(self, client):
        resp = client.post(reverse("users:login"), {"email": "GUEST@example.com", "password": PASSWORD},
                           format="json")
        assert resp.status_code == 200
        assert resp.data["user"]["id"] == self.user.id

    def test_cookie_session_round_trip(self, client):
        client.post(reverse("users:login"), {"email": "guest@example.com", "password": PASSWORD}, format="json")

        # no Authorization header: the middleware reads the access cookie
        resp = client.get(reverse("users:me"))
        assert resp.status_code == 200
        assert resp.data["firstName"] == "Ayesha"

        resp = client.post(reverse("users:logout"))
        assert resp.status_code == 200
        assert client.cookies["access_token"].value == ""

        assert client.get(reverse("users:me")).status_code in (401, 403)

    def test_refresh_cookie_restores_access(self, client):
        resp = client.post(reverse("users:login"), {"email": "guest@example.com", "password": PASSWORD},
                           format="json")
        client.cookies["access_token"] = "expired-or-garbage"

        resp = client.get(reverse("users:me"))
        assert resp.status_code == 200
        assert resp.cookies["access_token"].value not in ("", "expired-or-garbage")

    def test_me_patch_cannot_promote(self, client):
        client.force_authenticate(self.user)
        resp = client.patch(reverse("users:me"), {"lastName": "Khan", "isAdmin": True}, format="json")
        assert resp.status_code == 200
        self.user.refresh_from_db()
        assert self.user.last_name == "Khan"
        assert not self.user.is_staff

    def test_me_requires_auth(self, client):
        assert client.get(reverse("users:me")).status_code in (401, 403)


@pytest.mark.django_db
def test_token_pair_and_refresh(client):
    AdminUserFactory(email="admin@example.com", password=PASSWORD)

    resp = client.post(reverse("token_obtain_pair"), {"email": "admin@example.com", "password": PASSWORD},
                       format="json")
    assert resp.status_code == 200
    access, refresh = resp.data["access"], resp.data["refresh"]

    resp = client.post(reverse("token_refresh"), {"refresh": refresh}, format="json")
    assert resp.status_code == 200
    assert resp.data["access"]

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    resp = client.get(reverse("users:me"))
    assert resp.data["isAdmin"] is True
