"""
Quota gate unit tests.

Tests for QuotaGate against the in-memory rate limit store.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from models.workout import Principal
from services.quota_gate import QuotaGate, quota_key
from tests.fakes import FakeRateLimitRepository

USER = Principal(user_id="user-1")
ADMIN = Principal(user_id="admin-1", is_admin=True)


@pytest.mark.unit
class TestCheckAndConsume:
    """Tests for counting generations."""

    def test_allows_until_limit(self, rate_limit_repo):
        gate = QuotaGate(rate_limit_repo, limit=3)

        results = [gate.check_and_consume(USER) for _ in range(4)]

        assert results == [True, True, True, False]
        assert rate_limit_repo.count_for(quota_key(USER.user_id)) == 3

    def test_users_counted_separately(self, rate_limit_repo):
        gate = QuotaGate(rate_limit_repo, limit=1)

        assert gate.check_and_consume(USER)
        assert gate.check_and_consume(Principal(user_id="user-2"))
        assert not gate.check_and_consume(USER)

    def test_admin_bypasses_store(self, rate_limit_repo):
        gate = QuotaGate(rate_limit_repo, limit=1)

        for _ in range(5):
            assert gate.check_and_consume(ADMIN)

        assert rate_limit_repo.consume_calls == 0

    def test_store_failure_fails_open(self, rate_limit_repo, caplog):
        rate_limit_repo.fail_with(ConnectionError("store down"))
        gate = QuotaGate(rate_limit_repo, limit=1)

        assert gate.check_and_consume(USER)
        assert gate.check_and_consume(USER)
        assert "allowing request" in caplog.text

    def test_window_expiry_resets_count(self):
        now = [datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)]
        repo = FakeRateLimitRepository(clock=lambda: now[0])
        gate = QuotaGate(repo, limit=2, window_seconds=3600)

        assert gate.check_and_consume(USER)
        assert gate.check_and_consume(USER)
        assert not gate.check_and_consume(USER)

        now[0] += timedelta(hours=1, seconds=1)

        assert gate.check_and_consume(USER)
        assert repo.count_for(quota_key(USER.user_id)) == 1

    def test_concurrent_requests_never_exceed_limit(self, rate_limit_repo):
        gate = QuotaGate(rate_limit_repo, limit=5)

        with ThreadPoolExecutor(max_workers=10) as pool:
            results = list(pool.map(lambda _: gate.check_and_consume(USER), range(20)))

        assert sum(results) == 5
        assert rate_limit_repo.count_for(quota_key(USER.user_id)) == 5


@pytest.mark.unit
class TestRemaining:
    """Tests for reporting remaining quota."""

    def test_fresh_user_has_full_quota(self, rate_limit_repo):
        status = QuotaGate(rate_limit_repo, limit=10).remaining(USER)

        assert status.remaining == 10
        assert status.reset_at is None
        assert not status.unlimited

    def test_counts_down(self, rate_limit_repo):
        gate = QuotaGate(rate_limit_repo, limit=10)
        gate.check_and_consume(USER)
        gate.check_and_consume(USER)

        status = gate.remaining(USER)

        assert status.remaining == 8
        assert status.reset_at is not None

    def test_never_negative(self, rate_limit_repo):
        rate_limit_repo.set_window(
            quota_key(USER.user_id),
            count=50,
            reset_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )

        status = QuotaGate(rate_limit_repo, limit=10).remaining(USER)

        assert status.remaining == 0

    def test_expired_window_reports_full_limit(self, rate_limit_repo):
        rate_limit_repo.set_window(
            quota_key(USER.user_id),
            count=10,
            reset_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        )

        status = QuotaGate(rate_limit_repo, limit=10).remaining(USER)

        assert status.remaining == 10

    def test_admin_unlimited(self, rate_limit_repo):
        status = QuotaGate(rate_limit_repo, limit=10).remaining(ADMIN)

        assert status.unlimited

    def test_store_failure_reports_full_limit(self, rate_limit_repo):
        rate_limit_repo.fail_with(ConnectionError("store down"))

        status = QuotaGate(rate_limit_repo, limit=10).remaining(USER)

        assert status.remaining == 10


@pytest.mark.unit
class TestQuotaKey:
    def test_format(self):
        assert quota_key("abc") == "abc:workout_generation"
