"""Tests for core/engine.py."""

from __future__ import annotations

import pytest

from cmmc_audit.core.checks import CHECKS
from cmmc_audit.core.engine import run_check, run_checks, summarize
from cmmc_audit.models.result import ControlStatus
from cmmc_audit.probes.base import ObservationFailure
from cmmc_audit.probes.snapshot import SnapshotProbe


class FailingProbe(SnapshotProbe):
    """Snapshot probe whose selected queries fail."""

    def __init__(self, snapshot: dict, failing: set[str], exc: type[Exception] = ObservationFailure):
        super().__init__(snapshot)
        self.failing = failing
        self.exc = exc

    def _maybe_fail(self, method: str) -> None:
        if method in self.failing:
            raise self.exc(f"{method} failed")

    def get_local_account(self, name):
        self._maybe_fail("get_local_account")
        return super().get_local_account(name)

    def get_registry_value(self, key_path, value_name):
        self._maybe_fail("get_registry_value")
        return super().get_registry_value(key_path, value_name)

    def get_account_policy(self):
        self._maybe_fail("get_account_policy")
        return super().get_account_policy()

    def get_security_policy(self):
        self._maybe_fail("get_security_policy")
        return super().get_security_policy()

    def get_event_log(self, name):
        self._maybe_fail("get_event_log")
        return super().get_event_log(name)


class TestRunChecks:
    def test_all_compliant(self, make_probe):
        results = run_checks(make_probe())
        assert len(results) == 9
        assert all(r.status == ControlStatus.PASS for r in results)

    def test_results_follow_check_order(self, make_probe):
        results = run_checks(make_probe())
        assert [(r.control_id, r.description) for r in results] == [
            (c.control_id, c.description) for c in CHECKS
        ]

    def test_guest_enabled_single_failure(self, make_probe):
        results = run_checks(make_probe(accounts={"Guest": {"enabled": True}}))
        failures = [r for r in results if r.status == ControlStatus.FAIL]
        assert len(failures) == 1
        assert failures[0].control_id == "3.1.3"
        assert failures[0].current_setting == "Enabled"

    def test_on_result_callback(self, make_probe):
        seen = []
        results = run_checks(make_probe(), on_result=seen.append)
        assert seen == results

    def test_results_are_immutable(self, make_probe):
        result = run_checks(make_probe())[0]
        with pytest.raises(Exception):
            result.status = ControlStatus.FAIL

    def test_deterministic(self, make_probe):
        probe = make_probe(accounts={"Guest": {"enabled": True}})
        assert run_checks(probe) == run_checks(probe)


class TestFailureIsolation:
    def test_observation_failure_uses_absence_policy(self, compliant_snapshot):
        probe = FailingProbe(
            compliant_snapshot,
            {"get_local_account", "get_registry_value", "get_event_log"},
        )
        results = run_checks(probe)
        by_desc = {r.description: r for r in results}

        guest = results[0]
        assert guest.status == ControlStatus.PASS
        assert guest.current_setting == "Not Found"
        assert results[1].current_setting == "Not Configured"
        assert results[1].status == ControlStatus.FAIL
        assert results[7].current_setting == "Log Not Found"
        assert results[8].current_setting == "Log Not Found"
        # Untouched checks still evaluate normally
        assert by_desc["Minimum password length"].status == ControlStatus.PASS

    def test_failure_does_not_affect_other_checks(self, compliant_snapshot):
        probe = FailingProbe(compliant_snapshot, {"get_account_policy"})
        results = run_checks(probe)
        assert len(results) == 9
        assert [r.status for r in results[3:7]] == [ControlStatus.FAIL] * 4
        assert results[2].status == ControlStatus.PASS
        assert results[7].status == ControlStatus.PASS

    def test_unexpected_error_is_contained(self, compliant_snapshot):
        probe = FailingProbe(compliant_snapshot, {"get_event_log"}, exc=RuntimeError)
        result = run_check(CHECKS[7], probe)
        assert result.status == ControlStatus.FAIL
        assert result.current_setting == "Log Not Found"


class TestSummarize:
    def test_counts(self, sample_results):
        summary = summarize(sample_results)
        assert summary.total == 3
        assert summary.passed == 2
        assert summary.failed == 1

    def test_empty(self):
        summary = summarize([])
        assert summary.total == 0


class TestWarningOutput:
    def test_bracketed_error_text_does_not_abort(self, compliant_snapshot):
        class BracketProbe(SnapshotProbe):
            def get_security_policy(self):
                raise ObservationFailure(
                    "secedit exited with 87: usage [/mergedpolicy] [/quiet] [/areas area1 area2...]"
                )

        results = run_checks(BracketProbe(compliant_snapshot), verbose=True)
        assert len(results) == 9
        assert results[2].current_setting == "Not Configured"
        assert results[2].status == ControlStatus.FAIL

    def test_bracketed_unexpected_error_does_not_abort(self, compliant_snapshot):
        class BrokenLogProbe(SnapshotProbe):
            def get_event_log(self, name):
                raise RuntimeError("handle closed [/bold] [/]")

        result = run_check(CHECKS[8], BrokenLogProbe(compliant_snapshot))
        assert result.status == ControlStatus.FAIL
        assert result.current_setting == "Log Not Found"

    def test_bracketed_setting_in_verbose_listing(self, capsys):
        from cmmc_audit.core.auditor import _print_result
        from cmmc_audit.models.result import ControlCheckResult

        _print_result(
            ControlCheckResult(
                control_family="Access Control",
                control_id="3.1.3",
                description="Guest account must be disabled",
                current_setting="[/odd]",
                compliant_setting="Disabled",
                status=ControlStatus.FAIL,
            )
        )
        assert "[/odd]" in capsys.readouterr().out
