#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for built-in settings and policy file overrides."""

import os
import shutil
import tempfile
import unittest

from vminstaller.vm_constants import EXCLUDED_PACKAGES
from vminstaller.installer.configs.constants.constants import MIN_FREE_DISK_GIB, PACKAGE_SOURCES
from vminstaller.installer.core.policy import InstallerSettings, load_settings
from vminstaller.installer.utils.exceptions import PolicyFileError
from vminstaller.installer.utils.logger_utils import InstallerLogger


class TestLoadSettings(unittest.TestCase):
    def setUp(self):
        InstallerLogger.set_console_output(False)
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        InstallerLogger.set_console_output(True)

    def _policy(self, text):
        path = os.path.join(self.temp_dir, "policy.yml")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_defaults_without_file(self):
        settings = load_settings(None)
        self.assertEqual(settings, InstallerSettings())
        self.assertEqual(settings.preflight.min_free_disk_gib, MIN_FREE_DISK_GIB)
        self.assertEqual(settings.excluded_packages, EXCLUDED_PACKAGES)
        self.assertEqual(settings.package_sources, PACKAGE_SOURCES)

    def test_overrides(self):
        settings = load_settings(
            self._policy(
                "preflight:\n"
                "  min_free_disk_gib: 80\n"
                "  tested_os_builds: ['19045', 22631]\n"
                "installer:\n"
                "  excluded_packages: [installer.vm, flaky.vm]\n"
                "  start_countdown_sec: 0\n"
                "  package_sources:\n"
                "    - [internal, 'https://nuget.example.com/v2', 1]\n"
            )
        )
        self.assertEqual(settings.preflight.min_free_disk_gib, 80)
        self.assertEqual(settings.preflight.tested_os_builds, ("19045", "22631"))
        self.assertEqual(settings.excluded_packages, ("installer.vm", "flaky.vm"))
        self.assertEqual(settings.start_countdown_sec, 0)
        self.assertEqual(settings.package_sources, (("internal", "https://nuget.example.com/v2", 1),))
        # untouched values keep their defaults
        self.assertEqual(settings.preflight.min_powershell_version, InstallerSettings().preflight.min_powershell_version)

    def test_empty_file_is_defaults(self):
        self.assertEqual(load_settings(self._policy("")), InstallerSettings())

    def test_missing_file(self):
        with self.assertRaises(PolicyFileError):
            load_settings(os.path.join(self.temp_dir, "nope.yml"))

    def test_unknown_section(self):
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("network:\n  timeout: 5\n"))

    def test_unknown_key(self):
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("preflight:\n  min_ram_gib: 8\n"))

    def test_preflight_not_settable_from_installer_section(self):
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("installer:\n  preflight: {}\n"))

    def test_bad_value(self):
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("preflight:\n  min_free_disk_gib: lots\n"))
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("installer:\n  excluded_packages: installer.vm\n"))

    def test_root_must_be_mapping(self):
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("- a\n- b\n"))

    def test_malformed_yaml(self):
        with self.assertRaises(PolicyFileError):
            load_settings(self._policy("preflight: [unclosed\n"))


if __name__ == "__main__":
    unittest.main()
