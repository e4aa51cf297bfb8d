#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for %NAME% expansion of document environment values."""

import unittest

from vminstaller.installer.core.config_document import ConfigDocument, expand_env_value, expanded_envs


ENVIRON = {"ProgramData": r"C:\ProgramData", "SystemDrive": "C:"}


class TestEnvExpansion(unittest.TestCase):
    def test_process_environment(self):
        self.assertEqual(expand_env_value(r"%ProgramData%\_VM", {}, ENVIRON), r"C:\ProgramData\_VM")

    def test_case_insensitive(self):
        self.assertEqual(expand_env_value(r"%systemdrive%\Tools", {}, ENVIRON), r"C:\Tools")

    def test_nested_document_references(self):
        envs = {"COMMON_DIR": r"%ProgramData%\_VM", "LOG_DIR": r"%COMMON_DIR%\logs"}
        self.assertEqual(expand_env_value(envs["LOG_DIR"], envs, ENVIRON), r"C:\ProgramData\_VM\logs")

    def test_document_wins_over_process_environment(self):
        envs = {"SystemDrive": "D:"}
        self.assertEqual(expand_env_value(r"%SystemDrive%\Tools", envs, ENVIRON), r"D:\Tools")

    def test_unknown_reference_left_alone(self):
        self.assertEqual(expand_env_value(r"%NOPE%\x", {}, ENVIRON), r"%NOPE%\x")

    def test_cycle_terminates(self):
        envs = {"A": "%B%", "B": "%A%"}
        # expansion stops at the first repeated name
        self.assertEqual(expand_env_value("%A%", envs, {}), "%A%")

    def test_expanded_envs_only_defined_keys(self):
        doc = ConfigDocument.from_names([], {"COMMON_DIR": r"%ProgramData%\_VM"})
        self.assertEqual(
            expanded_envs(doc, ("COMMON_DIR", "RAW_TOOLS_DIR"), ENVIRON),
            {"COMMON_DIR": r"C:\ProgramData\_VM"},
        )


if __name__ == "__main__":
    unittest.main()
