#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for the ordered Windows installation steps against a mocked platform."""

import os

from vminstaller.vm_constants import ENV_KEY_COMMON_DIR, PROFILE_KEY, PROFILE_NAME
from vminstaller.installer.configs.constants.enums import ControlFlow
from vminstaller.installer.core.config_document import ConfigDocument, read_document
from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan
from vminstaller.installer.tests.mock.test_framework import BaseInstallerTest, MockPlatform


class TestInstallSteps(BaseInstallerTest):
    def setUp(self):
        super().setUp()
        self.common_dir = os.path.join(self.temp_dir, "common")
        self.doc = ConfigDocument.from_names(["a.vm", "b.vm"], {ENV_KEY_COMMON_DIR: self.common_dir})
        self.paths = InstallPaths.in_directory(os.path.join(self.temp_dir, "work"))
        self.plan = InstallPlan.build("installer.vm", "analyst", "pw")

    def _platform(self, control_flow=ControlFlow.INSTALL):
        return MockPlatform(ui=self.mock_ui, control_flow=control_flow)

    def _first_index(self, platform, fragment):
        for i, command in enumerate(platform.commands()):
            if fragment in command:
                return i
        self.fail(f"{fragment} was never run")

    def test_steps_run_in_order(self):
        platform = self._platform()
        self.assertTrue(platform.run_installation(self.doc, self.plan, self.paths))
        order = [
            "Get-Module -ListAvailable",
            "choco --version",
            "sc.exe stop wuauserv",
            "choco feature enable",
            "choco source add",
            "powercfg /change",
            "choco install common.vm",
            "Install-BoxstarterPackage",
        ]
        indexes = [self._first_index(platform, fragment) for fragment in order]
        self.assertEqual(indexes, sorted(indexes))
        self.assertEqual(len(platform.commands("Install-BoxstarterPackage")), 1)

    def test_machine_environment_and_shared_copy(self):
        platform = self._platform()
        platform.run_installation(self.doc, self.plan, self.paths)
        names = {name: value for name, value, _scope in platform.env_writes}
        self.assertEqual(names[ENV_KEY_COMMON_DIR], self.common_dir)
        self.assertEqual(names[PROFILE_KEY], PROFILE_NAME)
        self.assertEqual(read_document(os.path.join(self.common_dir, "config.xml")), self.doc)

    def test_layout_copied_next_to_shared_document(self):
        paths = InstallPaths.in_directory(os.path.join(self.temp_dir, "work"), with_layout=True)
        os.makedirs(paths.working_dir)
        with open(paths.layout_path, "w", encoding="utf-8") as f:
            f.write("<LayoutModificationTemplate/>")
        self.assertTrue(self._platform().run_installation(self.doc, self.plan, paths))
        self.assertTrue(os.path.isfile(os.path.join(self.common_dir, "LayoutModification.xml")))

    def test_dry_run_runs_and_writes_nothing(self):
        platform = self._platform(ControlFlow.DRYRUN)
        self.assertTrue(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertEqual(platform.executed_commands, [])
        self.assertEqual(platform.env_writes, [])
        self.assertEqual(platform.registry_writes, [])
        self.assertFalse(os.path.exists(self.common_dir))

    def test_config_only_writes_files_but_installs_nothing(self):
        platform = self._platform(ControlFlow.CONFIG)
        self.assertTrue(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertEqual(platform.executed_commands, [])
        self.assertEqual(platform.env_writes, [])
        self.assertTrue(os.path.isfile(os.path.join(self.common_dir, "config.xml")))

    def test_boxstarter_failure_is_fatal(self):
        platform = self._platform()
        platform.boxstarter_version = None
        self.assertFalse(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertEqual(platform.commands("choco"), [])
        self.assertEqual(platform.env_writes, [])

    def test_old_boxstarter_is_bootstrapped(self):
        platform = self._platform()
        platform.boxstarter_version = "2.13.0"
        self.assertFalse(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertEqual(len(platform.commands("Get-Boxstarter -Force")), 1)

    def test_chocolatey_failure_is_not_fatal(self):
        platform = self._platform()
        platform.chocolatey_version = "1.4.0"
        platform.set_command_result("choco upgrade chocolatey", 1, ["upgrade failed"])
        self.assertTrue(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertEqual(len(platform.commands("Install-BoxstarterPackage")), 1)

    def test_package_manager_setting_failure_is_fatal(self):
        platform = self._platform()
        platform.set_command_result("choco feature enable", 1, ["nope"])
        self.assertFalse(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertEqual(platform.commands("Install-BoxstarterPackage"), [])

    def test_update_service_failure_is_best_effort(self):
        platform = self._platform()
        platform.set_command_result("sc.exe", 5, ["Access is denied."])
        self.assertTrue(platform.run_installation(self.doc, self.plan, self.paths))

    def test_shared_package_failure_is_fatal(self):
        platform = self._platform()
        platform.set_command_result("choco install common.vm", 1, ["not found"])
        self.assertFalse(platform.run_installation(self.doc, self.plan, self.paths))
        self.assertFalse(os.path.exists(os.path.join(self.common_dir, "config.xml")))

    def test_unresolvable_common_dir_fails(self):
        doc = ConfigDocument.from_names(["a.vm"], {ENV_KEY_COMMON_DIR: r"%NO_SUCH_VARIABLE_FOR_TESTS%\_VM"})
        self.assertFalse(self._platform().run_installation(doc, self.plan, self.paths))

    def test_engine_exit_code_fails_install(self):
        platform = self._platform()
        platform.set_command_result("Install-BoxstarterPackage", 1, ["boom"])
        self.assertFalse(platform.run_installation(self.doc, self.plan, self.paths))
