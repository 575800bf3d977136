from types import SimpleNamespace

import pytest

from study_buddy.services import auth_service


@pytest.mark.parametrize(
    "password, message",
    [
        ("Ab1!", "at least 8 characters"),
        ("lowercase1!", "uppercase letter"),
        ("UPPERCASE1!", "lowercase letter"),
        ("NoDigits!!", "number"),
        ("NoSymbol123", "symbol"),
    ],
)
def test_validate_password_reports_first_failing_rule(password, message):
    assert message in auth_service.validate_password(password)


def test_validate_password_accepts_strong_password():
    assert auth_service.validate_password("Str0ng!Pass") is None


def test_verify_firebase_token_requires_bearer_header():
    class _Auth:
        @staticmethod
        def verify_id_token(token):
            return {"uid": "u1"} if token == "good" else None

    missing = SimpleNamespace(headers={})
    good = SimpleNamespace(headers={"Authorization": "Bearer good"})

    assert auth_service.verify_firebase_token(missing, _Auth, None) is None
    assert auth_service.verify_firebase_token(good, _Auth, None) == {"uid": "u1"}


def test_verify_firebase_token_swallows_verification_errors():
    class _Auth:
        @staticmethod
        def verify_id_token(_token):
            raise ValueError("expired")

    request = SimpleNamespace(headers={"Authorization": "Bearer stale"})
    assert auth_service.verify_firebase_token(request, _Auth, None) is None


def test_build_user_profile_defaults_name():
    profile = auth_service.build_user_profile("u1", "s@example.com")

    assert profile["name"] == "Student"
    assert profile["avatar"] == "S"
    assert auth_service.build_user_profile("u1", "", {"name": "ada", "email": "ada@example.com"})["avatar"] == "A"
