"""
Tests for RecoveryPolicy.
"""
import pytest

from src.safety.recovery_policy import RecoveryAction, RecoveryPolicy


@pytest.mark.unit
class TestNoCandidates:
    """Test record_no_candidates() decisions."""

    def test_probe_below_limit(self):
        policy = RecoveryPolicy(max_consecutive_failures=5, max_page_refreshes=5)

        actions = [policy.record_no_candidates() for _ in range(4)]

        assert actions == [RecoveryAction.PROBE] * 4
        assert policy.consecutive_failures == 4

    def test_reload_at_limit_resets_failures(self):
        policy = RecoveryPolicy(max_consecutive_failures=5, max_page_refreshes=5)

        actions = [policy.record_no_candidates() for _ in range(5)]

        assert actions[-1] == RecoveryAction.RELOAD
        assert policy.consecutive_failures == 0
        assert policy.page_refreshes == 1

    def test_terminate_after_refreshes_exhausted(self):
        """Five polls per refresh; the sixth cycle terminates after exactly five reloads."""
        policy = RecoveryPolicy(max_consecutive_failures=5, max_page_refreshes=5)

        actions = [policy.record_no_candidates() for _ in range(30)]

        assert actions.count(RecoveryAction.RELOAD) == 5
        assert actions[29] == RecoveryAction.TERMINATE
        assert RecoveryAction.TERMINATE not in actions[:29]
        assert policy.page_refreshes == 5

    def test_zero_refreshes_terminates_on_fifth_poll(self):
        policy = RecoveryPolicy(max_consecutive_failures=5, max_page_refreshes=0)

        actions = [policy.record_no_candidates() for _ in range(5)]

        assert actions == [RecoveryAction.PROBE] * 4 + [RecoveryAction.TERMINATE]

    def test_candidates_found_resets(self):
        policy = RecoveryPolicy(max_consecutive_failures=3)
        policy.record_no_candidates()
        policy.record_no_candidates()

        policy.record_candidates_found()

        assert policy.consecutive_failures == 0
        assert policy.record_no_candidates() == RecoveryAction.PROBE


@pytest.mark.unit
class TestRetriesAndReset:
    """Test confirmation_retries() and reset()."""

    def test_confirmation_retries(self):
        assert list(RecoveryPolicy(max_action_retries=2).confirmation_retries()) == [1, 2]
        assert list(RecoveryPolicy(max_action_retries=0).confirmation_retries()) == []

    def test_reset(self):
        policy = RecoveryPolicy(max_consecutive_failures=1, page_refreshes=3)
        policy.record_no_candidates()

        policy.reset()

        assert policy.consecutive_failures == 0
        assert policy.page_refreshes == 0

    def test_defaults_from_settings(self):
        policy = RecoveryPolicy()

        assert policy.max_consecutive_failures == 5
        assert policy.max_page_refreshes == 5
        assert policy.max_action_retries == 2
