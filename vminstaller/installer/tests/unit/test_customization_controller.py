#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for the customization window controller (no window is created)."""

import unittest

from vminstaller.vm_constants import ENV_KEY_COMMON_DIR, ENV_KEY_TOOL_LIST_DIR
from vminstaller.installer.core.catalog import CatalogItem
from vminstaller.installer.core.customization import CustomizationSession, SessionState
from vminstaller.installer.ui.gui.controllers import CustomizationController


class RecordingView:
    def __init__(self):
        self.renders = []

    def render(self, selected, available, envs):
        self.renders.append((selected, available, envs))


class TestCustomizationController(unittest.TestCase):
    def setUp(self):
        self.session = CustomizationSession(
            (CatalogItem("ghidra.vm", "11.0"), CatalogItem("x64dbg.vm", "2024.1")),
            (CatalogItem("ida.free.vm", "8.4"), CatalogItem("wireshark.vm", "")),
        )
        self.controller = CustomizationController(self.session)
        self.view = RecordingView()
        self.controller.set_view(self.view)

    def test_rows_carry_name_and_label(self):
        self.assertEqual(self.controller.selected_rows(), [("ghidra.vm", "ghidra.vm 11.0"), ("x64dbg.vm", "x64dbg.vm 2024.1")])
        self.assertEqual(self.controller.available_rows(), [("ida.free.vm", "ida.free.vm 8.4"), ("wireshark.vm", "wireshark.vm")])

    def test_transfers_refresh_view(self):
        self.controller.on_add(["wireshark.vm"])
        self.controller.on_remove(["ghidra.vm"])
        self.assertEqual(self.session.selected_names(), {"x64dbg.vm", "wireshark.vm"})
        selected, available, _envs = self.view.renders[-1]
        self.assertEqual([name for name, _ in selected], ["wireshark.vm", "x64dbg.vm"])
        self.assertEqual([name for name, _ in available], ["ghidra.vm", "ida.free.vm"])

    def test_add_all_remove_all_reset(self):
        self.controller.on_add_all()
        self.assertEqual(self.controller.available_rows(), [])
        self.controller.on_remove_all()
        self.assertEqual(self.controller.selected_rows(), [])
        self.controller.on_reset()
        self.assertEqual(self.session.selected_names(), {"ghidra.vm", "x64dbg.vm"})

    def test_filter_is_view_only(self):
        self.controller.on_filter("  IDA ")
        self.assertEqual(self.controller.available_rows(), [("ida.free.vm", "ida.free.vm 8.4")])
        self.assertEqual(self.controller.selected_rows(), [])
        self.assertEqual(len(self.session.universe()), 4)
        self.controller.on_filter("")
        self.assertEqual(len(self.controller.selected_rows()), 2)

    def test_folder_chosen_keeps_leaf(self):
        value = self.controller.on_folder_chosen(ENV_KEY_COMMON_DIR, "D:\\")
        self.assertEqual(value, "D:\\_VM")
        self.assertEqual(self.view.renders[-1][2][ENV_KEY_COMMON_DIR], "D:\\_VM")

    def test_cancelled_folder_pick_changes_nothing(self):
        before = self.session.envs()
        renders = len(self.view.renders)
        self.assertIsNone(self.controller.on_folder_chosen(ENV_KEY_COMMON_DIR, ""))
        self.assertEqual(self.session.envs(), before)
        self.assertEqual(len(self.view.renders), renders)

    def test_ok_requires_every_directory(self):
        self.controller.commit_envs({ENV_KEY_TOOL_LIST_DIR: "  "})
        ok, message = self.controller.on_ok()
        self.assertFalse(ok)
        self.assertIn(ENV_KEY_TOOL_LIST_DIR, message)
        self.assertTrue(self.session.is_open)
        self.assertIsNone(self.controller.result)

    def test_ok_accepts(self):
        self.controller.commit_envs({ENV_KEY_COMMON_DIR: r"E:\Shared"})
        ok, _message = self.controller.on_ok()
        self.assertTrue(ok)
        self.assertIs(self.session.state, SessionState.ACCEPTED)
        self.assertEqual(self.controller.result.envs[ENV_KEY_COMMON_DIR], r"E:\Shared")
        self.assertEqual(self.controller.result.selected, {"ghidra.vm", "x64dbg.vm"})

    def test_cancel(self):
        self.controller.on_cancel()
        self.assertIs(self.session.state, SessionState.CANCELLED)
        self.assertIsNone(self.controller.result)
        # window close after cancel is harmless
        self.controller.on_cancel()


if __name__ == "__main__":
    unittest.main()
