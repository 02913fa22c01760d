import pytest
from firebase_admin import auth as firebase_auth

from shop_api import security
from shop_api.config.settings import Settings
from shop_api.errors import AuthenticationError
from shop_api.security import FirebaseTokenVerifier, Principal


@pytest.fixture
def verifier(monkeypatch) -> FirebaseTokenVerifier:
    monkeypatch.setattr(security, "get_firebase_app", lambda settings: None)
    return FirebaseTokenVerifier(Settings(firebase_project_id="shop-test"))


def fail_with(error):
    def verify_id_token(token, app=None, check_revoked=False):
        raise error
    return verify_id_token


def test_verify_returns_principal(verifier, monkeypatch):
    claims = {
        "uid": "u1",
        "email": "u1@example.com",
        "email_verified": True,
        "name": "User One",
        "picture": None,
    }
    monkeypatch.setattr(firebase_auth, "verify_id_token", lambda token, app=None, check_revoked=False: claims)

    principal = verifier.verify("token")

    assert principal == Principal(uid="u1", email="u1@example.com", email_verified=True, name="User One")


def test_principal_defaults_to_unverified():
    assert Principal.from_claims({"uid": "u2"}).email_verified is False


@pytest.mark.parametrize(
    "error, expected",
    [
        (firebase_auth.ExpiredIdTokenError("expired", cause=None), "Token expired"),
        (firebase_auth.RevokedIdTokenError("revoked"), "Token revoked"),
        (firebase_auth.UserDisabledError("disabled"), "Account disabled"),
        (firebase_auth.InvalidIdTokenError("bad signature"), "Invalid token"),
        (ValueError("malformed"), "Invalid token"),
    ],
)
def test_verify_maps_firebase_errors(verifier, monkeypatch, error, expected):
    monkeypatch.setattr(firebase_auth, "verify_id_token", fail_with(error))

    with pytest.raises(AuthenticationError) as exc_info:
        verifier.verify("token")

    assert exc_info.value.error == expected
    assert exc_info.value.status_code == 401
