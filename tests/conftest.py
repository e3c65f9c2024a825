import pytest

from twostep.auth.totp import OTPParameters
from twostep.db.repository import InMemoryUserDirectory
from twostep.errors import DirectoryUnavailable
from twostep.middleware.audit import AuditLogger
from twostep.models.user import UserRecord
from twostep.services import EnrollmentService, VerificationService

# Middle of time step 56666667 for a 30 second period
FIXED_TIME = 1_700_000_025


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnavailableDirectory:
    """Directory whose backing store is down."""

    async def get(self, user_id):
        raise DirectoryUnavailable("connection refused")

    async def update(self, user_id, fields):
        raise DirectoryUnavailable("connection refused")


@pytest.fixture
def params():
    return OTPParameters(issuer="TwoStep", label="TwoStep")


@pytest.fixture
def clock():
    return FakeClock(FIXED_TIME)


@pytest.fixture
def audit():
    return AuditLogger()


@pytest.fixture
def directory():
    return InMemoryUserDirectory({
        "u1": UserRecord(id="u1", name="Ada", email="ada@example.com"),
        "u2": UserRecord(id="u2", name="Grace", email="grace@example.com"),
    })


@pytest.fixture
def enrollment(directory, params, audit):
    return EnrollmentService(directory, params, audit=audit)


@pytest.fixture
def verification(directory, params, audit, clock):
    return VerificationService(directory, params, audit=audit, clock=clock)


@pytest.fixture
def unavailable_directory():
    return UnavailableDirectory()
