from datetime import timedelta

import pytest

from src.linkbio.core.security import (
    InvalidTokenError,
    TokenIssuer,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_then_verify(self):
        digest = get_password_hash("pw123")
        assert verify_password("pw123", digest)

    def test_wrong_password_rejected(self):
        digest = get_password_hash("pw123")
        assert not verify_password("pw124", digest)
        assert not verify_password("", digest)

    def test_salt_differs_per_call(self):
        assert get_password_hash("pw123") != get_password_hash("pw123")

    def test_digest_does_not_contain_plaintext(self):
        assert "pw123" not in get_password_hash("pw123")

    def test_malformed_digest_is_rejected(self):
        assert not verify_password("pw123", "not-a-bcrypt-hash")


class TestTokenIssuer:
    def setup_method(self):
        self.issuer = TokenIssuer("unit-test-secret")

    def test_user_id_round_trip(self):
        token, _ = self.issuer.sign_for_user(42, timedelta(hours=24))
        assert self.issuer.user_id_from(token) == 42

    def test_expiry_matches_ttl(self):
        token, expires_at = self.issuer.sign_for_user(1, timedelta(hours=1))
        claims = self.issuer.verify(token)
        assert claims["exp"] == int(expires_at.timestamp())
        assert claims["exp"] - claims["iat"] == 3600

    def test_tokens_for_same_user_differ(self):
        first, _ = self.issuer.sign_for_user(1, timedelta(hours=24))
        second, _ = self.issuer.sign_for_user(1, timedelta(hours=24))
        assert first != second

    def test_expired_token_rejected(self):
        token, _ = self.issuer.sign_for_user(1, timedelta(seconds=-5))
        with pytest.raises(InvalidTokenError):
            self.issuer.verify(token)

    def test_other_secret_rejected(self):
        token, _ = TokenIssuer("another-secret").sign_for_user(1, timedelta(hours=1))
        with pytest.raises(InvalidTokenError):
            self.issuer.verify(token)

    def test_swapped_payload_rejected(self):
        token, _ = self.issuer.sign_for_user(1, timedelta(hours=1))
        other, _ = self.issuer.sign_for_user(2, timedelta(hours=1))
        header, _, signature = token.split(".")
        forged = ".".join([header, other.split(".")[1], signature])
        with pytest.raises(InvalidTokenError):
            self.issuer.verify(forged)

    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
    def test_malformed_token_rejected(self, token):
        with pytest.raises(InvalidTokenError):
            self.issuer.verify(token)

    def test_missing_subject_rejected(self):
        token, _ = self.issuer.sign({"role": "x"}, timedelta(hours=1))
        with pytest.raises(InvalidTokenError):
            self.issuer.verify(token)

    def test_non_numeric_subject_rejected(self):
        token, _ = self.issuer.sign({"sub": "alice"}, timedelta(hours=1))
        assert self.issuer.verify(token)["sub"] == "alice"
        with pytest.raises(InvalidTokenError):
            self.issuer.user_id_from(token)
