#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Customization menu for TUI installer interface."""

from typing import List, Optional

from vminstaller.vm_constants import TRACKED_ENV_KEYS
from vminstaller.installer.core.catalog import CatalogItem
from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession
from vminstaller.installer.ui.shared.labels import env_display_label
from vminstaller.installer.ui.tui.base_menu import BaseMenu

# distinguishes "cancelled" from "keep looping" in process_choice
_CANCELLED = object()


class CustomizationMenu(BaseMenu):
    """Package selection and directory menu driving a CustomizationSession."""

    def __init__(self, session: CustomizationSession, **kwargs):
        super().__init__(**kwargs)
        self.session = session
        self.filter_text = ""
        self._shown_selected: List[CatalogItem] = []
        self._shown_available: List[CatalogItem] = []

    def _matches(self, item: CatalogItem) -> bool:
        return not self.filter_text or self.filter_text.lower() in item.name.lower()

    def build_menu(self) -> None:
        self.menu_builder.add_header("Customize Installation")
        self.menu_builder.add_description(
            f"{len(self.session.selected_names())} package(s) selected, "
            f"{len(self.session.available_names())} available to add"
            + (f" (filter: '{self.filter_text}')" if self.filter_text else "")
        )
        self.menu_builder.add_blank_line()

        self._shown_selected = [i for i in self.session.selected_items() if self._matches(i)]
        self._shown_available = [i for i in self.session.available_items() if self._matches(i)]
        self.menu_builder.add_columns(
            "Selected",
            [f"S{n}. {item.label()}" for n, item in enumerate(self._shown_selected, start=1)],
            "Available",
            [f"A{n}. {item.label()}" for n, item in enumerate(self._shown_available, start=1)],
        )

        self.menu_builder.add_blank_line()
        self.menu_builder.add_header("Directories")
        envs = self.session.envs()
        for number, key in enumerate(TRACKED_ENV_KEYS, start=1):
            self.menu_builder.add_item(number, env_display_label(key), envs[key])

        self.menu_builder.add_action_section()
        self.menu_builder.add_action("a", "Add packages (e.g. 1,3,5-7 from Available)")
        self.menu_builder.add_action("aa", "Add all")
        self.menu_builder.add_action("r", "Remove packages (from Selected)")
        self.menu_builder.add_action("ra", "Remove all")
        self.menu_builder.add_action("f", "Filter lists")
        self.menu_builder.add_action("x", "Reset to defaults")
        self.menu_builder.add_action("s", "Accept and Continue")
        self.menu_builder.add_action("q", "Cancel installation")

    def process_choice(self, choice: str):
        choice_lower = choice.lower()

        if choice_lower == "q":
            if self.ask_yes_no("Cancel the installation?", default=False):
                return self.handle_cancel() or _CANCELLED
        elif choice_lower == "s":
            return self.session.accept()
        elif choice_lower == "aa":
            self.session.add_all()
        elif choice_lower == "ra":
            self.session.remove_all()
        elif choice_lower == "x":
            self.session.reset()
            self.filter_text = ""
        elif choice_lower == "f":
            self.filter_text = (self.ask_string("Show only packages containing (blank for all)", default="") or "").strip()
        elif choice_lower == "a":
            self._transfer(self._shown_available, "Available", self.session.add_selected)
        elif choice_lower == "r":
            self._transfer(self._shown_selected, "Selected", self.session.remove_selected)
        elif choice.isdigit():
            # parse_numeric_choice reports an out-of-range number itself
            item_index = self.parse_numeric_choice(choice, len(TRACKED_ENV_KEYS))
            if item_index is not None:
                self._edit_env(TRACKED_ENV_KEYS[item_index])
        else:
            self.handle_invalid_choice(choice)
        return None

    def _transfer(self, shown: List[CatalogItem], list_name: str, transition) -> None:
        if not shown:
            self.handle_invalid_choice(f"no {list_name.lower()} packages shown")
            return
        text = self.ask_string(f"{list_name} package numbers", default="")
        if not text:
            return
        try:
            indexes = self.parse_numeric_selection(text.upper().replace(list_name[0], ""), len(shown))
        except ValueError:
            self.handle_invalid_choice(text)
            return
        transition([shown[i].name for i in indexes])

    def _edit_env(self, key: str) -> None:
        leaf = self.session.initial_env(key).rstrip("\\/").replace("/", "\\").split("\\")[-1]
        if self.ask_yes_no(f"Choose a parent folder for {key}? ('{leaf}' will be appended)", default=True):
            folder = self.ask_string(f"Parent folder for {key}", default="")
            if folder:
                self.session.set_env_from_folder(key, folder.strip())
        else:
            value = self.ask_string(f"Value for {key}", default=self.session.envs()[key])
            if value:
                self.session.set_env(key, value)

    def handle_cancel(self) -> None:
        if self.session.is_open:
            self.session.cancel()
        return None

    def run(self) -> Optional[CustomizationResult]:
        result = self.run_menu()
        if self.session.is_open:
            self.session.cancel()
        return result if isinstance(result, CustomizationResult) else None
