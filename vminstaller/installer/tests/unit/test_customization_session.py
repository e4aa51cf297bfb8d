#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for the customization session state machine."""

import unittest

from vminstaller.vm_constants import ENV_DEFAULTS, ENV_KEY_COMMON_DIR, ENV_KEY_RAW_TOOLS_DIR, TRACKED_ENV_KEYS
from vminstaller.installer.core.catalog import CatalogItem, CatalogResolution
from vminstaller.installer.core.config_document import ConfigDocument
from vminstaller.installer.core.customization import (
    CustomizationSession,
    SessionState,
    tracked_env_defaults,
)
from vminstaller.installer.utils.exceptions import SessionClosedError


def _items(*names):
    return tuple(CatalogItem(n, "1.0") for n in names)


class TestCustomizationSession(unittest.TestCase):
    def setUp(self):
        self.session = CustomizationSession(_items("a.vm", "c.vm"), _items("d.vm", "e.vm"))

    def assertPartition(self):
        selected = self.session.selected_names()
        available = self.session.available_names()
        self.assertFalse(selected & available)
        self.assertEqual(selected | available, self.session.universe())

    def test_initial_partition(self):
        self.assertEqual(self.session.selected_names(), {"a.vm", "c.vm"})
        self.assertEqual(self.session.available_names(), {"d.vm", "e.vm"})
        self.assertPartition()

    def test_add_and_remove(self):
        self.session.add_selected(["d.vm"])
        self.session.remove_selected(["a.vm"])
        self.assertEqual(self.session.selected_names(), {"c.vm", "d.vm"})
        self.assertPartition()

    def test_add_all_and_remove_all(self):
        self.session.add_all()
        self.assertEqual(self.session.available_names(), frozenset())
        self.session.remove_all()
        self.assertEqual(self.session.selected_names(), frozenset())
        self.assertPartition()

    def test_unknown_name_rejected(self):
        with self.assertRaises(KeyError):
            self.session.add_selected(["zzz.vm"])
        self.assertPartition()

    def test_reset_restores_selection_and_envs(self):
        self.session.remove_all()
        self.session.set_env(ENV_KEY_COMMON_DIR, r"D:\VM")
        self.session.reset()
        self.assertEqual(self.session.selected_names(), {"a.vm", "c.vm"})
        self.assertEqual(self.session.envs()[ENV_KEY_COMMON_DIR], ENV_DEFAULTS[ENV_KEY_COMMON_DIR])

    def test_items_sorted_for_display(self):
        session = CustomizationSession(_items("Zed.vm", "alpha.vm"), ())
        self.assertEqual([i.name for i in session.selected_items()], ["alpha.vm", "Zed.vm"])

    def test_set_env_untracked_key(self):
        with self.assertRaises(KeyError):
            self.session.set_env("PATH", r"C:\Windows")

    def test_set_env_from_folder_keeps_leaf(self):
        value = self.session.set_env_from_folder(ENV_KEY_RAW_TOOLS_DIR, "E:\\")
        self.assertEqual(value, r"E:\Tools")
        self.assertEqual(self.session.envs()[ENV_KEY_RAW_TOOLS_DIR], r"E:\Tools")

    def test_accept_returns_result_and_closes(self):
        self.session.add_selected(["e.vm"])
        result = self.session.accept()
        self.assertEqual(result.selected, {"a.vm", "c.vm", "e.vm"})
        self.assertEqual(set(result.envs), set(TRACKED_ENV_KEYS))
        self.assertIs(self.session.state, SessionState.ACCEPTED)
        self.assertIs(self.session.result, result)

    def test_closed_session_rejects_transitions(self):
        self.session.cancel()
        self.assertIs(self.session.state, SessionState.CANCELLED)
        self.assertIsNone(self.session.result)
        for action in (
            lambda: self.session.add_selected(["d.vm"]),
            self.session.add_all,
            self.session.remove_all,
            self.session.reset,
            lambda: self.session.set_env(ENV_KEY_COMMON_DIR, "x"),
            self.session.accept,
            self.session.cancel,
        ):
            with self.assertRaises(SessionClosedError):
                action()

    def test_from_resolution_with_document_envs(self):
        doc = ConfigDocument.from_names(["a.vm"], {ENV_KEY_COMMON_DIR: r"D:\Custom"})
        resolution = CatalogResolution(to_install=_items("a.vm"), available=_items("b.vm"))
        session = CustomizationSession.from_resolution(resolution, tracked_env_defaults(doc))
        self.assertEqual(session.envs()[ENV_KEY_COMMON_DIR], r"D:\Custom")
        self.assertEqual(session.envs()[ENV_KEY_RAW_TOOLS_DIR], ENV_DEFAULTS[ENV_KEY_RAW_TOOLS_DIR])


if __name__ == "__main__":
    unittest.main()
