from ppob_api.services.password import hash_password, verify_password


def test_hash_round_trip():
    hashed = hash_password("secret123", 4)
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)


def test_wrong_password_rejected():
    hashed = hash_password("secret123", 4)
    assert not verify_password("secret124", hashed)


def test_hash_is_salted_per_call():
    assert hash_password("secret123", 4) != hash_password("secret123", 4)


def test_cost_factor_is_applied():
    assert hash_password("secret123", 5).startswith("$2b$05$")


def test_malformed_hash_never_matches():
    assert not verify_password("secret123", "not-a-bcrypt-hash")
