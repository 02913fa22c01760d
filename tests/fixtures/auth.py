"""Authentication fixtures: a token verifier that knows a few fixed tokens."""
from typing import Dict

import pytest

from shop_api.errors import AuthenticationError
from shop_api.security import Principal

ALICE_TOKEN = "alice-token"
BOB_TOKEN = "bob-token"
CAROL_TOKEN = "carol-token"
EXPIRED_TOKEN = "expired-token"

ALICE = Principal(
    uid="alice-uid",
    email="alice@example.com",
    email_verified=True,
    name="Alice",
    picture="https://example.com/alice.png",
)
BOB = Principal(uid="bob-uid", email="bob@example.com", email_verified=True, name="Bob")
# carol has not verified their email address
CAROL = Principal(uid="carol-uid", email="carol@example.com", email_verified=False, name="Carol")


class FakeTokenVerifier:
    """Stands in for ``FirebaseTokenVerifier``; maps tokens straight to principals."""

    def __init__(self, principals: Dict[str, Principal]):
        self.principals = principals

    def verify(self, token: str) -> Principal:
        if token == EXPIRED_TOKEN:
            raise AuthenticationError(
                "Your authentication token has expired. Please log in again.",
                error="Token expired",
            )
        if token not in self.principals:
            raise AuthenticationError("Please provide a valid authentication token")
        return self.principals[token]


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token_verifier() -> FakeTokenVerifier:
    return FakeTokenVerifier({ALICE_TOKEN: ALICE, BOB_TOKEN: BOB, CAROL_TOKEN: CAROL})
