#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for the preflight checks and the control layer that consumes them."""

import unittest

from vminstaller.installer.configs.constants.enums import CheckOutcome, ControlFlow, InstallerResult
from vminstaller.installer.core.policy import PreflightPolicy
from vminstaller.installer.core.validation import (
    GIB,
    PREFLIGHT_CHECKS,
    apply_post_validation_actions,
    run_preflight,
    validate,
)
from vminstaller.installer.tests.mock.test_framework import (
    FakeNetworkProbe,
    MockPlatform,
    MockUI,
    StaticHostFacts,
)
from vminstaller.installer.utils.logger_utils import InstallerLogger


def _results(facts=None, probe=None, policy=None):
    return {r.name: r for r in validate(facts or StaticHostFacts(), policy or PreflightPolicy(), probe or FakeNetworkProbe())}


class TestChecks(unittest.TestCase):
    def setUp(self):
        InstallerLogger.set_console_output(False)

    def tearDown(self):
        InstallerLogger.set_console_output(True)

    def test_healthy_host(self):
        results = list(validate(StaticHostFacts(), PreflightPolicy(), FakeNetworkProbe()))
        self.assertEqual(len(results), len(PREFLIGHT_CHECKS))
        # everything passes except the snapshot acknowledgment
        self.assertEqual([r.name for r in results if not r.passed], ["Snapshot"])
        self.assertIs(results[-1].outcome, CheckOutcome.WARN_CONFIRM)

    def test_old_powershell_is_fatal(self):
        result = _results(StaticHostFacts(powershell_version="4.0"))["PowerShell version"]
        self.assertIs(result.outcome, CheckOutcome.FAIL)

    def test_not_elevated_is_fatal(self):
        self.assertIs(_results(StaticHostFacts(is_elevated=False))["Administrator"].outcome, CheckOutcome.FAIL)

    def test_execution_policy(self):
        self.assertTrue(_results(StaticHostFacts(execution_policy="bypass"))["Execution policy"].passed)
        result = _results(StaticHostFacts(execution_policy="RemoteSigned"))["Execution policy"]
        self.assertIs(result.outcome, CheckOutcome.FAIL)

    def test_soft_checks_warn(self):
        results = _results(
            StaticHostFacts(
                os_version="10.0.17763",
                manufacturer_model=("Dell Inc.", "OptiPlex 7090"),
                free_disk_bytes=20 * GIB,
                tamper_protection_enabled=True,
                realtime_protection_enabled=True,
            )
        )
        for name in ("Windows build", "Virtual machine", "Disk space", "Tamper protection", "Real-time protection"):
            self.assertIs(results[name].outcome, CheckOutcome.WARN_CONFIRM, name)
        self.assertTrue(results["Windows version"].passed)

    def test_old_os_major_warns(self):
        self.assertIs(_results(StaticHostFacts(os_version="6.3.9600"))["Windows version"].outcome, CheckOutcome.WARN_CONFIRM)

    def test_policy_overrides_threshold(self):
        policy = PreflightPolicy(min_free_disk_gib=10)
        self.assertTrue(_results(StaticHostFacts(free_disk_bytes=20 * GIB), policy=policy)["Disk space"].passed)

    def test_exception_in_soft_check_becomes_warning(self):
        results = _results(StaticHostFacts(tamper_protection_enabled=OSError("access denied")))
        self.assertIs(results["tamper protection"].outcome, CheckOutcome.WARN_CONFIRM)

    def test_exception_in_hard_check_becomes_failure(self):
        results = _results(StaticHostFacts(is_elevated=OSError("no shell32")))
        self.assertIs(results["elevated"].outcome, CheckOutcome.FAIL)

    def test_network_requires_tcp_and_http_200(self):
        probe = FakeNetworkProbe(statuses={"https://www.myget.org": 503})
        result = _results(probe=probe)["Network"]
        self.assertIs(result.outcome, CheckOutcome.FAIL)
        self.assertIn("503", result.message)

    def test_unreachable_host_not_probed_over_http(self):
        probe = FakeNetworkProbe(unreachable={"github.com"})
        self.assertIs(_results(probe=probe)["Network"].outcome, CheckOutcome.FAIL)
        self.assertNotIn(("https", "https://github.com"), probe.probes)


class TestRunPreflight(unittest.TestCase):
    def setUp(self):
        InstallerLogger.set_console_output(False)

    def tearDown(self):
        InstallerLogger.set_console_output(True)

    def test_whitespace_username_aborts_before_network(self):
        probe = FakeNetworkProbe()
        facts = StaticHostFacts(username="John Doe")
        ui = MockUI()
        self.assertFalse(run_preflight(validate(facts, PreflightPolicy(), probe), ui))
        self.assertEqual(probe.probes, [])
        self.assertNotIn("manufacturer_model", facts.queried)
        self.assertEqual(ui.calls("ask_yes_no"), [])

    def test_warning_confirmed(self):
        ui = MockUI(responses={"snapshot": True})
        self.assertTrue(run_preflight(validate(StaticHostFacts(), PreflightPolicy(), FakeNetworkProbe()), ui))
        self.assertEqual(len(ui.calls("ask_yes_no")), 1)

    def test_warning_declined(self):
        ui = MockUI(responses={"Tamper Protection": False, "snapshot": True})
        facts = StaticHostFacts(tamper_protection_enabled=True)
        probe = FakeNetworkProbe()
        self.assertFalse(run_preflight(validate(facts, PreflightPolicy(), probe), ui))
        # network comes after tamper protection and is never probed
        self.assertEqual(probe.probes, [])

    def test_non_interactive_cannot_confirm(self):
        self.assertFalse(
            run_preflight(validate(StaticHostFacts(), PreflightPolicy(), FakeNetworkProbe()), None, non_interactive=True)
        )


class TestPostValidationActions(unittest.TestCase):
    def setUp(self):
        InstallerLogger.set_console_output(False)

    def tearDown(self):
        InstallerLogger.set_console_output(True)

    def test_password_never_expires(self):
        platform = MockPlatform()
        self.assertEqual(apply_post_validation_actions(platform, "analyst"), InstallerResult.SUCCESS)
        self.assertEqual(len(platform.commands("Set-LocalUser -Name 'analyst' -PasswordNeverExpires $true")), 1)

    def test_dry_run_runs_nothing(self):
        platform = MockPlatform(control_flow=ControlFlow.DRYRUN)
        self.assertEqual(apply_post_validation_actions(platform, "analyst"), InstallerResult.SKIPPED)
        self.assertEqual(platform.executed_commands, [])


if __name__ == "__main__":
    unittest.main()
