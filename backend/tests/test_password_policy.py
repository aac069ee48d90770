"""Password complexity rules and bcrypt hashing."""

import pytest

from iskolar.core.errors import ValidationError
from iskolar.core.security import hash_password, validate_password, verify_password


def test_compliant_password_passes():
    validate_password("Aa1!aaaa")
    validate_password("Sch0lar$hip2025")


@pytest.mark.parametrize(
    "password, rule",
    [
        ("Aa1!aaa", "at least 8 characters"),
        ("aa1!aaaa", "uppercase"),
        ("AA1!AAAA", "lowercase"),
        ("Aaa!aaaa", "number"),
        ("Aa1aaaaa", "special character"),
    ],
)
def test_each_rule_is_named_in_the_error(password, rule):
    with pytest.raises(ValidationError) as exc:
        validate_password(password)
    assert rule in exc.value.message
    assert exc.value.status_code == 400


def test_overlong_password_is_rejected():
    with pytest.raises(ValidationError):
        validate_password("Aa1!" + "a" * 80)


def test_hash_is_not_the_plain_password_and_verifies():
    hashed = hash_password("Aa1!aaaa")
    assert hashed != "Aa1!aaaa"
    assert hashed.startswith("$2")
    assert verify_password("Aa1!aaaa", hashed)
    assert not verify_password("Aa1!aaab", hashed)


def test_verify_password_handles_garbage_hash():
    assert verify_password("Aa1!aaaa", "not-a-bcrypt-hash") is False
