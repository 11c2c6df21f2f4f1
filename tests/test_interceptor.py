"""Per-request authentication outcomes."""

from pathlib import Path
from types import SimpleNamespace
import sys
from typing import Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from Auth.interceptor import AuthInterceptor, AuthOutcome, extract_bearer_token  # noqa: E402
from Auth.tokens import TokenService  # noqa: E402
from Users.user import User  # noqa: E402

SECRET = b"interceptor-test-key-0123456789abcdef"


class DictIdentityStore:
    def __init__(self, *users: User) -> None:
        self.users = {user.email: user for user in users}
        self.lookups = 0

    def find_by_email(self, email: str) -> Optional[User]:
        self.lookups += 1
        return self.users.get(email)


class BrokenIdentityStore:
    def find_by_email(self, email: str) -> Optional[User]:
        raise ConnectionError("database unavailable")


@pytest.fixture()
def guest() -> User:
    return User(id=7, email="guest@example.com", name="Guest", phone_number="+1", password="hash", role="USER")


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(SECRET)


def _context() -> SimpleNamespace:
    return SimpleNamespace()


def test_extract_bearer_token() -> None:
    assert extract_bearer_token(None) is None
    assert extract_bearer_token("   ") is None
    assert extract_bearer_token("Basic abc") is None
    assert extract_bearer_token("Bearer ") is None
    assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"
    assert extract_bearer_token("bearer abc") == "abc"


def test_no_credentials_passes_anonymous(tokens: TokenService, guest: User) -> None:
    context = _context()
    outcome = AuthInterceptor(tokens, DictIdentityStore(guest)).authenticate(None, context)

    assert outcome is AuthOutcome.PASS_ANONYMOUS
    assert getattr(context, "principal", None) is None


def test_unverifiable_token_passes_anonymous(tokens: TokenService, guest: User) -> None:
    store = DictIdentityStore(guest)
    context = _context()

    outcome = AuthInterceptor(tokens, store).authenticate("Bearer not-a-token", context)

    assert outcome is AuthOutcome.PASS_ANONYMOUS
    assert store.lookups == 0


def test_unknown_subject_passes_anonymous(tokens: TokenService, guest: User) -> None:
    token = tokens.issue(guest).serialize()
    context = _context()

    outcome = AuthInterceptor(tokens, DictIdentityStore()).authenticate(f"Bearer {token}", context)

    assert outcome is AuthOutcome.PASS_ANONYMOUS
    assert getattr(context, "principal", None) is None


def test_valid_token_attaches_principal_and_authority(tokens: TokenService, guest: User) -> None:
    token = tokens.issue(guest).serialize()
    context = _context()

    outcome = AuthInterceptor(tokens, DictIdentityStore(guest)).authenticate(f"Bearer {token}", context)

    assert outcome is AuthOutcome.PASS_AUTHENTICATED
    assert context.principal == guest
    assert context.authority == "USER"


def test_role_comes_from_store_not_token(tokens: TokenService, guest: User) -> None:
    token = tokens.issue(guest).serialize()
    promoted = guest.model_copy(update={"role": "ADMIN"})
    context = _context()

    AuthInterceptor(tokens, DictIdentityStore(promoted)).authenticate(f"Bearer {token}", context)

    assert context.authority == "ADMIN"


def test_already_attached_principal_is_kept(tokens: TokenService, guest: User) -> None:
    store = DictIdentityStore(guest)
    existing = guest.model_copy(update={"name": "Already here"})
    context = SimpleNamespace(principal=existing)
    token = tokens.issue(guest).serialize()

    outcome = AuthInterceptor(tokens, store).authenticate(f"Bearer {token}", context)

    assert outcome is AuthOutcome.PASS_AUTHENTICATED
    assert context.principal is existing
    assert store.lookups == 0


def test_identity_store_failure_passes_anonymous(tokens: TokenService, guest: User) -> None:
    token = tokens.issue(guest).serialize()
    context = _context()

    outcome = AuthInterceptor(tokens, BrokenIdentityStore()).authenticate(f"Bearer {token}", context)

    assert outcome is AuthOutcome.PASS_ANONYMOUS
    assert getattr(context, "principal", None) is None
