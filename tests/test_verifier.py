from datetime import timedelta
from enum import Enum

import pytest

from dizkaz.verifier import CODE_LENGTH, CodeNotFoundError, Verifier


class FakeClient:
    def __init__(self):
        self.data = {}
        self.expiry = {}

    def set(self, name, value, ex=None):
        self.data[name] = value.encode("utf-8") if isinstance(value, str) else value
        self.expiry[name] = ex
        return True

    def get(self, name):
        return self.data.get(name)

    def delete(self, *names):
        return sum(1 for n in names if self.data.pop(n, None) is not None)


class Kind(Enum):
    SIGNUP = "signup"


EMAIL = "someone@example.com"


def test_gen_code_is_six_digits():
    code = Verifier(FakeClient()).gen_code()
    assert len(code) == CODE_LENGTH == 6
    assert code.isdigit()


def test_encrypt_and_verify_round_trip():
    verifier = Verifier(FakeClient())
    hashed = verifier.encrypt_code("123456")
    assert hashed != "123456"
    assert verifier.verify_code("123456", hashed) is None


def test_verify_wrong_code_raises():
    verifier = Verifier(FakeClient())
    hashed = verifier.encrypt_code("123456")
    with pytest.raises(ValueError):
        verifier.verify_code("654321", hashed)


def test_save_and_get():
    verifier = Verifier(FakeClient())
    verifier.save_code(EMAIL, "111222", "signup")
    assert verifier.get_code(EMAIL, "signup") == "111222"


def test_missing_code_raises():
    verifier = Verifier(FakeClient())
    with pytest.raises(CodeNotFoundError):
        verifier.get_code(EMAIL, "signup")


def test_not_found_is_key_error():
    verifier = Verifier(FakeClient())
    with pytest.raises(KeyError):
        verifier.get_code(EMAIL, "reset")


def test_delete_removes_code():
    verifier = Verifier(FakeClient())
    verifier.save_code(EMAIL, "333444", "signup")
    verifier.delete_code(EMAIL, "signup")
    with pytest.raises(CodeNotFoundError):
        verifier.get_code(EMAIL, "signup")


def test_code_types_are_separate():
    verifier = Verifier(FakeClient())
    verifier.save_code(EMAIL, "555666", "signup")
    with pytest.raises(CodeNotFoundError):
        verifier.get_code(EMAIL, "reset")


def test_enum_code_type_matches_its_value():
    verifier = Verifier(FakeClient())
    verifier.save_code(EMAIL, "777888", Kind.SIGNUP)
    assert verifier.get_code(EMAIL, "signup") == "777888"


def test_default_lifetime_used_as_expiry():
    client = FakeClient()
    Verifier(client).save_code(EMAIL, "999000", "signup")
    assert list(client.expiry.values()) == [timedelta(minutes=5)]