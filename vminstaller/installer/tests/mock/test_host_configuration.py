#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for the host configuration write set."""

from vminstaller.vm_constants import PROFILE_KEY
from vminstaller.installer.configs.constants.constants import STORE_POLICY_KEY
from vminstaller.installer.configs.constants.enums import ControlFlow, InstallerResult
from vminstaller.installer.platforms.utils.host_configuration import (
    CATEGORY_ENVIRONMENT,
    CATEGORY_PACKAGE_MANAGER,
    CATEGORY_POWER,
    CATEGORY_UPDATES,
    HostConfigurationWriter,
)
from vminstaller.installer.tests.mock.test_framework import BaseInstallerTest, MockPlatform

SOURCES = [("vm-packages", "https://feed.example/v2", 1), ("chocolatey", "https://community.example/v2", 2)]


class TestHostConfiguration(BaseInstallerTest):
    def _writer(self, platform=None):
        writer = HostConfigurationWriter(platform or self.mock_platform)
        return (
            writer.disable_updates()
            .configure_package_manager(SOURCES, r"C:\Temp\chocolatey")
            .disable_power_timeouts()
            .export_environment({"COMMON_DIR": r"C:\VM"})
        )

    def test_categories_in_collection_order(self):
        self.assertEqual(
            self._writer().categories(),
            [CATEGORY_UPDATES, CATEGORY_PACKAGE_MANAGER, CATEGORY_POWER, CATEGORY_ENVIRONMENT],
        )

    def test_writes_keyed_by_target(self):
        writer = self._writer()
        count = len(writer.writes())
        writer.disable_power_timeouts().configure_package_manager(SOURCES, r"C:\Temp\chocolatey")
        self.assertEqual(len(writer.writes()), count)
        writer.export_environment({"common_dir": r"D:\VM"})
        self.assertEqual(len(writer.writes()), count)

    def test_describe_marks_best_effort(self):
        lines = self._writer().describe()
        self.assertTrue(any("wuauserv" in line and "(best effort)" in line for line in lines))
        self.assertTrue(any("priority 2" in line for line in lines))

    def test_apply_routes_each_kind_of_write(self):
        status, _ = self._writer().apply()
        self.assertEqual(status, InstallerResult.SUCCESS)
        self.assertIn((STORE_POLICY_KEY, "AutoDownload", 2), self.mock_platform.registry_writes)
        self.assertEqual([w[0] for w in self.mock_platform.env_writes], ["COMMON_DIR", PROFILE_KEY])
        self.assertEqual(len(self.mock_platform.commands("powercfg /change")), 8)
        self.assertEqual(len(self.mock_platform.commands("choco source add")), 2)

    def test_applying_twice_repeats_the_same_writes(self):
        writer = self._writer()
        writer.apply()
        first = list(self.mock_platform.executed_commands)
        writer.apply()
        self.assertEqual(self.mock_platform.executed_commands[len(first):], first)

    def test_best_effort_failure_continues(self):
        self.mock_platform.set_command_result("sc.exe", 1, ["Access is denied."])
        status, _ = self._writer().apply()
        self.assertEqual(status, InstallerResult.SUCCESS)
        self.assertEqual(len(self.mock_platform.env_writes), 2)

    def test_required_failure_stops(self):
        self.mock_platform.set_command_result("powercfg", 1, ["Invalid parameters"])
        status, message = self._writer().apply()
        self.assertEqual(status, InstallerResult.FAILURE)
        self.assertIn(CATEGORY_POWER, message)
        self.assertEqual(self.mock_platform.env_writes, [])

    def test_dry_run_applies_nothing(self):
        platform = MockPlatform(control_flow=ControlFlow.DRYRUN)
        status, _ = self._writer(platform).apply()
        self.assertEqual(status, InstallerResult.SKIPPED)
        self.assertEqual(platform.executed_commands, [])
        self.assertEqual(platform.registry_writes, [])
