"""OTP engine: RFC 6238 vectors, step determinism, countdown, verification window."""
import base64
import hashlib
import hmac
import struct
from datetime import datetime, timezone

import pyotp
import pytest

from backend.app.core.errors import InvalidSecretError
from backend.app.security import totp
from tests.conftest import DEMO_SECRET, RFC_SECRET


def reference_code(secret_b32: str, unix_time: int) -> str:
    """Straight RFC 4226 dynamic truncation, independent of pyotp."""
    key = base64.b32decode(secret_b32 + "=" * (-len(secret_b32) % 8))
    digest = hmac.new(key, struct.pack(">Q", unix_time // 30), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    value = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(value % 10 ** 6).zfill(6)


class TestGenerate:

    # RFC 6238 appendix B, SHA1 column, last six digits
    @pytest.mark.parametrize("unix_time,expected", [
        (59, "287082"),
        (1111111109, "081804"),
        (1111111111, "050471"),
        (1234567890, "005924"),
        (2000000000, "279037"),
        (20000000000, "353130"),
    ])
    def test_rfc6238_vectors(self, unix_time, expected):
        assert totp.generate(RFC_SECRET, unix_time).code == expected

    @pytest.mark.parametrize("unix_time", [0, 59, 1700000000, 1700000029, 1700000030])
    def test_demo_secret_matches_reference_hmac(self, unix_time):
        assert totp.generate(DEMO_SECRET, unix_time).code == reference_code(DEMO_SECRET, unix_time)

    def test_code_is_six_digits(self):
        code = totp.generate(DEMO_SECRET, 1700000000).code
        assert len(code) == 6 and code.isdigit()

    def test_same_code_within_a_step(self):
        start = 1700000010 - (1700000010 % 30)
        codes = {totp.generate(DEMO_SECRET, t).code for t in range(start, start + 30)}
        assert len(codes) == 1

    def test_countdown_decreases_then_resets(self):
        start = 1700000010 - (1700000010 % 30)
        remaining = [totp.generate(DEMO_SECRET, t).remaining_seconds for t in range(start, start + 31)]

        assert remaining[:30] == list(range(30, 0, -1))
        assert remaining[30] == 30

    @pytest.mark.parametrize("unix_time", [0, 30, 60, 1700000010 - (1700000010 % 30)])
    def test_step_boundary_has_full_window(self, unix_time):
        assert totp.generate(DEMO_SECRET, unix_time).remaining_seconds == 30

    def test_remaining_seconds_always_in_range(self):
        for t in range(1700000000, 1700000100):
            assert 1 <= totp.remaining_seconds(t) <= 30

    def test_float_time_is_truncated(self):
        assert totp.generate(RFC_SECRET, 59.9) == totp.generate(RFC_SECRET, 59)

    def test_datetime_input(self):
        aware = datetime(2005, 3, 18, 1, 58, 29, tzinfo=timezone.utc)  # 1111111109
        naive = aware.replace(tzinfo=None)

        assert totp.generate(RFC_SECRET, aware).code == "081804"
        assert totp.generate(RFC_SECRET, naive) == totp.generate(RFC_SECRET, aware)

    def test_matches_pyotp_now(self):
        now = datetime.now(timezone.utc)
        expected = pyotp.TOTP(DEMO_SECRET).at(now)
        assert totp.generate(DEMO_SECRET, now).code == expected


class TestSecretValidation:

    @pytest.mark.parametrize("raw,expected", [
        ("JBSWY3DPEHPK3PXP", "JBSWY3DPEHPK3PXP"),
        ("jbswy3dpehpk3pxp", "JBSWY3DPEHPK3PXP"),
        ("jbsw y3dp ehpk 3pxp", "JBSWY3DPEHPK3PXP"),
        ("  JBSWY3DPEHPK3PXP\n", "JBSWY3DPEHPK3PXP"),
        ("MFRGG===", "MFRGG==="),
    ])
    def test_normalize(self, raw, expected):
        assert totp.normalize_secret(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "JBSWY3DP!", "ABC1", "ABC8", "A", "=AAA", None])
    def test_invalid_secret(self, raw):
        with pytest.raises(InvalidSecretError):
            totp.normalize_secret(raw)

    def test_generate_rejects_invalid_secret(self):
        with pytest.raises(InvalidSecretError):
            totp.generate("not base32 at all!", 59)

    def test_verify_rejects_invalid_secret(self):
        with pytest.raises(InvalidSecretError):
            totp.verify("not base32 at all!", "123456", 59)


class TestVerify:

    NOW = 1111111111  # counter 37037037

    def test_current_code(self):
        code = totp.generate(RFC_SECRET, self.NOW).code
        assert totp.verify(RFC_SECRET, code, self.NOW)

    def test_adjacent_steps_within_window(self):
        previous = totp.generate(RFC_SECRET, self.NOW - 30).code
        following = totp.generate(RFC_SECRET, self.NOW + 30).code

        assert totp.verify(RFC_SECRET, previous, self.NOW, window=1)
        assert totp.verify(RFC_SECRET, following, self.NOW, window=1)

    def test_outside_window(self):
        old = totp.generate(RFC_SECRET, self.NOW - 60).code

        assert not totp.verify(RFC_SECRET, old, self.NOW, window=1)
        assert totp.verify(RFC_SECRET, old, self.NOW, window=2)

    def test_window_zero_accepts_only_current_step(self):
        previous = totp.generate(RFC_SECRET, self.NOW - 30).code
        assert not totp.verify(RFC_SECRET, previous, self.NOW, window=0)

    def test_spaces_in_candidate_are_ignored(self):
        code = totp.generate(RFC_SECRET, self.NOW).code
        assert totp.verify(RFC_SECRET, f"{code[:3]} {code[3:]}", self.NOW)

    @pytest.mark.parametrize("candidate", ["", "12345", "1234567", "abcdef", "12345a", None])
    def test_malformed_candidate(self, candidate):
        assert not totp.verify(RFC_SECRET, candidate, self.NOW)

    def test_steps_checked_from_current_outward(self, monkeypatch):
        seen = []
        original = pyotp.TOTP.generate_otp

        def recording(self, input):
            seen.append(input)
            return original(self, input)

        nearby = {totp.generate(RFC_SECRET, self.NOW + 30 * k).code for k in range(-2, 3)}
        miss = next(c for c in ("000000", "111111", "222222", "333333", "444444", "555555") if c not in nearby)

        monkeypatch.setattr(pyotp.TOTP, "generate_otp", recording)
        assert not totp.verify(RFC_SECRET, miss, self.NOW, window=2)

        counter = self.NOW // 30
        assert seen == [counter, counter - 1, counter + 1, counter - 2, counter + 2]

    def test_stops_at_first_match(self, monkeypatch):
        seen = []
        original = pyotp.TOTP.generate_otp

        def recording(self, input):
            seen.append(input)
            return original(self, input)

        code = totp.generate(RFC_SECRET, self.NOW).code
        monkeypatch.setattr(pyotp.TOTP, "generate_otp", recording)

        assert totp.verify(RFC_SECRET, code, self.NOW, window=3)
        assert seen == [self.NOW // 30]

    def test_no_negative_counters_near_epoch(self):
        code = totp.generate(RFC_SECRET, 0).code
        assert totp.verify(RFC_SECRET, code, 10, window=2)
