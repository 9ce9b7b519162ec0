from app.core.security import hash_password, verify_password


def test_hash_then_verify():
    digest = hash_password("correct horse battery")
    assert verify_password("correct horse battery", digest)


def test_hash_is_never_plaintext():
    digest = hash_password("correct horse battery")
    assert digest != "correct horse battery"
    assert digest.startswith("$2")


def test_same_password_hashes_differently():
    assert hash_password("correct horse battery") != hash_password("correct horse battery")


def test_wrong_password_is_rejected():
    digest = hash_password("correct horse battery")
    assert not verify_password("incorrect horse battery", digest)


def test_corrupted_digests_fail_closed():
    digest = hash_password("correct horse battery")
    for corrupted in ["", "not-a-bcrypt-hash", digest[:20], "$2b$04$" + "!" * 53]:
        assert verify_password("correct horse battery", corrupted) is False


def test_missing_digest_fails_closed():
    assert verify_password("correct horse battery", None) is False


def test_overlong_password_is_rejected_without_digest_warning(caplog):
    digest = hash_password("correct horse battery")
    with caplog.at_level("WARNING"):
        assert verify_password("x" * 100, digest) is False
    assert "could not be parsed" not in caplog.text
