from portfolio.utils.passwords import hash_password, verify_password


def test_hash_and_verify() -> None:
    hashed = hash_password("admin123")
    assert hashed != "admin123"
    assert hashed.startswith("$2")
    assert verify_password("admin123", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_hashes_are_salted() -> None:
    assert hash_password("same") != hash_password("same")


def test_verify_against_non_bcrypt_value() -> None:
    assert verify_password("admin123", "plaintext") is False
