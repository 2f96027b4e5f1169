"""Tests for the credential flow routes."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.modules.auth.session import SessionCarrier
from src.modules.auth.tokens import SessionTokenIssuer

API = "/api/users"
COOKIE = "session"


def signup(client: TestClient, email: str = "a@b.com", password: str = "pw12"):
    return client.post(f"{API}/signup", json={"email": email, "password": password})


def signin(client: TestClient, email: str = "a@b.com", password: str = "pw12"):
    return client.post(f"{API}/signin", json={"email": email, "password": password})


def current_user(client: TestClient) -> dict:
    response = client.get(f"{API}/currentuser")
    assert response.status_code == 200
    return response.json()


class TestSignup:
    """Tests for POST /signup."""

    def test_signup_returns_public_account(self, client: TestClient) -> None:
        """Should create the account and return only its public fields."""
        response = signup(client)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "email"}
        assert body["email"] == "a@b.com"
        assert "passwordHash" not in body
        assert "password" not in response.text

    def test_signup_sets_session_cookie(self, client: TestClient) -> None:
        """Should sign the new account in."""
        response = signup(client)

        assert COOKIE in response.cookies
        assert current_user(client)["currentUser"]["email"] == "a@b.com"

    def test_signup_invalid_email(self, client: TestClient) -> None:
        """Should reject an invalid email with a field error."""
        response = signup(client, email="bad")

        assert response.status_code == 400
        assert {"message": "Email must be valid", "field": "email"} in response.json()["errors"]

    def test_signup_reserved_domain(self, client: TestClient) -> None:
        """Addresses on special-use domains pass the syntax check."""
        response = signup(client, email="a@b.test")

        assert response.status_code == 201
        assert response.json()["email"] == "a@b.test"

    def test_signup_short_password(self, client: TestClient) -> None:
        """Should reject a password below the minimum length."""
        response = signup(client, password="ab")

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors == [
            {"message": "Password must be between 4 and 20 characters", "field": "password"}
        ]

    def test_signup_long_password(self, client: TestClient) -> None:
        """Should reject a password above the maximum length."""
        response = signup(client, password="a" * 21)

        assert response.status_code == 400

    def test_signup_empty_body(self, client: TestClient) -> None:
        """Should report every failed rule at once."""
        response = client.post(f"{API}/signup")

        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["errors"]]
        assert fields == ["email", "email", "password", "password"]

    def test_signup_malformed_json(self, client: TestClient) -> None:
        """A body that is not JSON should fail validation, not crash."""
        response = client.post(
            f"{API}/signup",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 4

    def test_signup_validation_failure_creates_nothing(self, client: TestClient) -> None:
        """A rejected request must not reach the store."""
        signup(client, email="bad")
        signup(client)

        users = client.get(f"{API}/").json()["users"]
        assert [u["email"] for u in users] == ["a@b.com"]

    def test_duplicate_signup(self, client: TestClient) -> None:
        """Second signup with the same email fails and leaves one account."""
        assert signup(client).status_code == 201

        response = signup(client, password="other1")

        assert response.status_code == 400
        assert response.json() == {"errors": [{"message": "Unable to create account"}]}
        assert "a@b.com" not in response.text

        users = client.get(f"{API}/").json()["users"]
        assert len(users) == 1

    def test_password_is_stored_trimmed(self, client: TestClient) -> None:
        """Surrounding whitespace is not part of the password."""
        signup(client, password="  pw12  ")
        client.cookies.clear()

        assert signin(client, password="pw12").status_code == 200


class TestSignin:
    """Tests for POST /signin."""

    def test_signin_success_sets_cookie(self, client: TestClient) -> None:
        """Should return the account and set the session cookie."""
        created = signup(client).json()
        client.cookies.clear()

        response = signin(client)

        assert response.status_code == 200
        assert response.json() == created
        assert COOKIE in response.cookies

    def test_wrong_password_and_unknown_email_look_identical(
        self, client: TestClient
    ) -> None:
        """Both failures must produce the same status and body."""
        signup(client)
        client.cookies.clear()

        wrong_password = signin(client, password="nope")
        unknown_email = signin(client, email="nobody@b.com")

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json() == {"errors": [{"message": "Invalid credentials"}]}
        assert COOKIE not in wrong_password.cookies

    def test_signin_validation(self, client: TestClient) -> None:
        """Should validate email and require a password."""
        response = client.post(f"{API}/signin", json={"email": "bad", "password": ""})

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"message": "Email must be valid", "field": "email"},
            {"message": "You must supply a password", "field": "password"},
        ]

    def test_signin_has_no_length_bound(self, client: TestClient) -> None:
        """A long password is a credential failure, not a validation one."""
        signup(client)

        response = signin(client, password="x" * 40)

        assert response.json() == {"errors": [{"message": "Invalid credentials"}]}

    def test_wide_character_passwords_are_compared_in_full(
        self, client: TestClient
    ) -> None:
        """A password sharing a 72-byte prefix with the real one must fail."""
        assert signup(client, password="😀" * 18 + "a").status_code == 201
        client.cookies.clear()

        response = signin(client, password="😀" * 18 + "b")

        assert response.status_code == 400
        assert response.json() == {"errors": [{"message": "Invalid credentials"}]}
        assert signin(client, password="😀" * 18 + "a").status_code == 200

    def test_email_is_case_sensitive(self, client: TestClient) -> None:
        """Signin should not match a differently cased email."""
        signup(client)

        assert signin(client, email="A@B.com").status_code == 400


class TestSignout:
    """Tests for POST /signout."""

    def test_signout_clears_cookie(self, client: TestClient) -> None:
        """Should overwrite the session cookie with an expired empty value."""
        signup(client)

        response = client.post(f"{API}/signout")

        assert response.status_code == 200
        assert response.content == b""
        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "max-age=0" in set_cookie
        assert current_user(client) == {"currentUser": None}

    def test_signout_without_session(self, client: TestClient) -> None:
        """Should still clear the cookie when no session was sent."""
        response = client.post(f"{API}/signout")

        assert response.status_code == 200
        assert COOKIE in response.headers["set-cookie"]
        assert current_user(client) == {"currentUser": None}


class TestCurrentUser:
    """Tests for GET /currentuser."""

    def test_anonymous(self, client: TestClient) -> None:
        """Should return null without a session."""
        assert current_user(client) == {"currentUser": None}

    def test_signed_in(self, client: TestClient) -> None:
        """Should return the identity from the session."""
        created = signup(client).json()

        assert current_user(client) == {"currentUser": created}

    def test_forged_session_is_anonymous(self, client: TestClient) -> None:
        """A token signed with another key should be silently ignored."""
        forged = SessionTokenIssuer("attacker-signing-key-0123456789abcdef").issue(
            uuid4(), "a@b.com"
        )
        client.cookies.set(COOKIE, SessionCarrier().encode(forged))

        assert current_user(client) == {"currentUser": None}

    @pytest.mark.parametrize("value", ["garbage", "e30", "%%%"])
    def test_garbage_session_is_anonymous(self, client: TestClient, value: str) -> None:
        """An undecodable cookie should never cause an error."""
        client.cookies.set(COOKIE, value)

        assert current_user(client) == {"currentUser": None}


class TestListUsers:
    """Tests for GET /."""

    def test_requires_auth(self, client: TestClient) -> None:
        """Should return 401 without a session."""
        response = client.get(f"{API}/")

        assert response.status_code == 401
        assert response.json() == {"errors": [{"message": "Not authorized"}]}

    def test_lists_public_projections(self, client: TestClient) -> None:
        """Should list every account with only id and email."""
        signup(client, email="one@b.com")
        signup(client, email="two@b.com")

        response = client.get(f"{API}/")

        assert response.status_code == 200
        users = response.json()["users"]
        assert [u["email"] for u in users] == ["one@b.com", "two@b.com"]
        assert all(set(u) == {"id", "email"} for u in users)


class TestCredentialLifecycle:
    """End-to-end signup, signin, signout."""

    def test_full_lifecycle(self, client: TestClient) -> None:
        """A session follows the account through the whole lifecycle."""
        response = signup(client)
        assert response.status_code == 201
        assert response.json()["email"] == "a@b.com"
        assert "passwordHash" not in response.json()

        client.cookies.clear()
        response = signin(client)
        assert response.status_code == 200
        assert COOKIE in response.cookies

        me = current_user(client)["currentUser"]
        assert me["email"] == "a@b.com"

        assert client.post(f"{API}/signout").status_code == 200
        assert current_user(client) == {"currentUser": None}
