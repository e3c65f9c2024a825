"""Tests for the TOTP engine."""

from datetime import datetime, timezone

import pyotp
import pytest

from twostep.auth.totp import (
    OTPParameters,
    build_enrollment_uri,
    compute_code,
    counter_at,
    validate,
)
from twostep.errors import InvalidParameters

# RFC 4226 / RFC 6238 shared secret "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC_SECRET_SHA256 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZA"

SECRET = "JBSWY3DPEHPK3PXPJBSWY3DP"


class TestCounterAt:

    def test_floor_division_by_period(self):
        assert counter_at(59) == 1
        assert counter_at(60) == 2
        assert counter_at(1111111109) == 37037036

    def test_custom_period(self):
        assert counter_at(119, period=60) == 1

    def test_accepts_aware_datetime(self):
        moment = datetime(2009, 2, 13, 23, 31, 30, tzinfo=timezone.utc)
        assert counter_at(moment) == 1234567890 // 30

    def test_naive_datetime_is_utc(self):
        assert counter_at(datetime(2009, 2, 13, 23, 31, 30)) == 1234567890 // 30

    @pytest.mark.parametrize("period", [0, -30])
    def test_rejects_non_positive_period(self, period):
        with pytest.raises(InvalidParameters):
            counter_at(100, period=period)


class TestComputeCode:

    @pytest.mark.parametrize("counter,expected", [
        (0, "755224"),
        (1, "287082"),
        (2, "359152"),
        (3, "969429"),
        (9, "520489"),
    ])
    def test_rfc4226_vectors(self, counter, expected):
        assert compute_code(RFC_SECRET, counter) == expected

    @pytest.mark.parametrize("timestamp,expected", [
        (59, "94287082"),
        (1111111109, "07081804"),
        (1234567890, "89005924"),
        (2000000000, "69279037"),
    ])
    def test_rfc6238_sha1_vectors(self, timestamp, expected):
        assert compute_code(RFC_SECRET, counter_at(timestamp), digits=8) == expected

    def test_rfc6238_sha256_vector(self):
        code = compute_code(RFC_SECRET_SHA256, counter_at(59), digits=8, algorithm="SHA256")
        assert code == "46119246"

    def test_zero_padded_to_digits(self):
        code = compute_code(RFC_SECRET, counter_at(1111111109), digits=8)
        assert code.startswith("0")
        assert len(code) == 8

    def test_deterministic(self):
        assert compute_code(SECRET, 42) == compute_code(SECRET, 42)

    def test_lowercase_secret_accepted(self):
        assert compute_code(RFC_SECRET.lower(), 1) == "287082"

    @pytest.mark.parametrize("kwargs", [
        {"secret": ""},
        {"secret": "not base32!"},
        {"digits": 5},
        {"digits": 9},
        {"algorithm": "MD5"},
        {"counter": -1},
    ])
    def test_invalid_parameters(self, kwargs):
        args = {"secret": SECRET, "counter": 1, **kwargs}
        with pytest.raises(InvalidParameters):
            compute_code(**args)


class TestOTPParameters:

    def test_defaults(self):
        params = OTPParameters()
        assert (params.algorithm, params.digits, params.period) == ("SHA1", 6, 30)

    def test_algorithm_normalized(self):
        assert OTPParameters(algorithm="sha256").algorithm == "SHA256"

    @pytest.mark.parametrize("kwargs", [
        {"digits": 4},
        {"period": 0},
        {"algorithm": "SHA3"},
    ])
    def test_rejects_bad_configuration(self, kwargs):
        with pytest.raises(InvalidParameters):
            OTPParameters(**kwargs)


class TestValidate:

    NOW = 1_700_000_025

    def code_at(self, offset=0):
        return compute_code(SECRET, counter_at(self.NOW) + offset)

    def test_current_code_matches_with_zero_window(self):
        result = validate(SECRET, self.code_at(), self.NOW, window=0)

        assert result.matched
        assert result.offset == 0

    @pytest.mark.parametrize("offset", [-1, 1])
    def test_adjacent_step_accepted_with_window_one(self, offset):
        result = validate(SECRET, self.code_at(offset), self.NOW, window=1)

        assert result.matched
        assert result.offset == offset

    @pytest.mark.parametrize("offset", [-1, 1])
    def test_adjacent_step_rejected_with_zero_window(self, offset):
        result = validate(SECRET, self.code_at(offset), self.NOW, window=0)

        assert not result.matched
        assert result.offset is None

    def test_two_steps_away_rejected_with_window_one(self):
        assert not validate(SECRET, self.code_at(2), self.NOW, window=1)
        assert not validate(SECRET, self.code_at(-2), self.NOW, window=1)

    def test_wrong_code_rejected(self):
        code = self.code_at()
        wrong = str((int(code) + 1) % 10**6).zfill(6)

        assert not validate(SECRET, wrong, self.NOW, window=1)

    def test_non_string_candidate_never_matches(self):
        assert not validate(SECRET, None, self.NOW, window=1)
        assert not validate(SECRET, int(self.code_at()), self.NOW, window=1)

    def test_skips_negative_counters(self):
        code = compute_code(SECRET, 0)
        result = validate(SECRET, code, 10, window=1)

        assert result.matched
        assert result.offset == 0

    def test_rejects_negative_window(self):
        with pytest.raises(InvalidParameters):
            validate(SECRET, "123456", self.NOW, window=-1)

    def test_rejects_empty_secret(self):
        with pytest.raises(InvalidParameters):
            validate("", "123456", self.NOW)

    def test_honors_parameters(self):
        params = OTPParameters(digits=8, period=60, algorithm="SHA256")
        code = compute_code(SECRET, counter_at(self.NOW, 60), 8, "SHA256")

        assert validate(SECRET, code, self.NOW, params=params)
        assert not validate(SECRET, code[-6:], self.NOW, params=params)


class TestEnrollmentUri:

    def test_canonical_shape(self):
        params = OTPParameters(issuer="TwoStep", label="TwoStep")
        uri = build_enrollment_uri(SECRET, params)

        assert uri == (
            "otpauth://totp/TwoStep:TwoStep"
            f"?secret={SECRET}&issuer=TwoStep&algorithm=SHA1&digits=6&period=30"
        )

    def test_spaces_percent_encoded(self):
        params = OTPParameters(issuer="Acme Corp", label="ada@example.com")
        uri = build_enrollment_uri(SECRET, params)

        assert uri.startswith("otpauth://totp/Acme%20Corp:ada%40example.com?")
        assert "issuer=Acme%20Corp" in uri
        assert "+" not in uri

    def test_slash_encoded_in_label(self):
        params = OTPParameters(issuer="A/B", label="ops/ada")
        uri = build_enrollment_uri(SECRET, params)

        assert uri.startswith("otpauth://totp/A%2FB:ops%2Fada?")
        assert uri.split("?")[0].count("/") == 3

    def test_round_trips_through_pyotp(self):
        params = OTPParameters(issuer="Acme", label="ada", digits=8, period=60)
        parsed = pyotp.parse_uri(build_enrollment_uri(SECRET, params))

        assert parsed.secret == SECRET
        assert parsed.issuer == "Acme"
        assert parsed.name == "ada"
        assert parsed.digits == 8
        assert parsed.interval == 60

    def test_parsed_uri_generates_same_codes(self):
        parsed = pyotp.parse_uri(build_enrollment_uri(SECRET))
        now = 1_700_000_025

        assert parsed.at(now) == compute_code(SECRET, counter_at(now))

    def test_rejects_empty_secret(self):
        with pytest.raises(InvalidParameters):
            build_enrollment_uri("")
