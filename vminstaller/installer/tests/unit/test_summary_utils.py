#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for installation summary and completion message builders."""

import unittest

from vminstaller.vm_constants import ENV_KEY_COMMON_DIR
from vminstaller.installer.configs.constants.enums import ControlFlow
from vminstaller.installer.core.config_document import ConfigDocument
from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan
from vminstaller.installer.utils.summary_utils import (
    SUMMARY_PACKAGE_PREVIEW,
    build_completion_message,
    build_install_summary_items,
)


class TestSummaryUtils(unittest.TestCase):
    def setUp(self):
        self.paths = InstallPaths.in_directory(r"C:\Users\analyst\Desktop", with_layout=True)

    def test_summary_items(self):
        doc = ConfigDocument.from_names(["b.vm", "A.vm"], {ENV_KEY_COMMON_DIR: r"C:\VM"})
        plan = InstallPlan.build("installer.vm", "analyst", "s3cret", allow_reboot=False)
        items = dict(build_install_summary_items(doc, plan, self.paths, ControlFlow.DRYRUN))
        self.assertEqual(items["Packages"], "2")
        self.assertEqual(items["Package List"], "A.vm, b.vm")
        self.assertEqual(items[ENV_KEY_COMMON_DIR], r"C:\VM")
        self.assertIs(items["Automatic Reboots"], False)
        self.assertIs(items["Auto-logon Credential"], True)
        self.assertIs(items["Dry Run"], True)
        self.assertTrue(items["Layout File"].endswith("LayoutModification.xml"))
        self.assertNotIn("s3cret", repr(items))

    def test_long_package_list_is_truncated(self):
        names = [f"pkg{i:02d}.vm" for i in range(SUMMARY_PACKAGE_PREVIEW + 5)]
        items = dict(build_install_summary_items(ConfigDocument.from_names(names), InstallPlan("installer.vm"), self.paths))
        self.assertTrue(items["Package List"].endswith("(+5 more)"))
        self.assertNotIn("Dry Run", items)

    def test_completion_message(self):
        doc = ConfigDocument.from_names([], {ENV_KEY_COMMON_DIR: r"C:\VM"})
        handed_off = build_completion_message(doc, handed_off=True)
        self.assertIn("Boxstarter", handed_off)
        self.assertIn(r"C:\VM\log.txt", handed_off)
        self.assertIn("no installation was started", build_completion_message(doc, handed_off=False))


if __name__ == "__main__":
    unittest.main()
