#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Customization View
==================

Two scrollable package lists with transfer buttons, the installation
directories with Browse buttons, and OK/Cancel.
"""

from tkinter import filedialog
from typing import Dict, List, Tuple

import customtkinter

from vminstaller.vm_constants import TRACKED_ENV_KEYS
from vminstaller.installer.ui.gui.controllers.customization_controller import CustomizationController
from vminstaller.installer.ui.gui.views.base_view import (
    BaseView,
    PADDING_LARGE,
    PADDING_MEDIUM,
    PADDING_SMALL,
)
from vminstaller.installer.ui.shared.labels import env_display_label


class CustomizationView(BaseView):
    """View for choosing packages and installation directories"""

    def __init__(self, parent, controller: CustomizationController, on_close=None):
        self.on_close = on_close
        self.selected_boxes: Dict[str, customtkinter.CTkCheckBox] = {}
        self.available_boxes: Dict[str, customtkinter.CTkCheckBox] = {}
        self.env_entries: Dict[str, customtkinter.CTkEntry] = {}
        super().__init__(parent, controller)

        # Register with controller AFTER UI elements are created
        self.controller.set_view(self)

    def create_ui(self):
        super().create_ui()
        self.frame.grid_columnconfigure((0, 2), weight=1)
        self.frame.grid_rowconfigure(2, weight=1)

        title = customtkinter.CTkLabel(
            self.frame,
            text="Customize Installation",
            font=customtkinter.CTkFont(size=20, weight="bold"),
        )
        title.grid(row=0, column=0, columnspan=3, padx=PADDING_LARGE, pady=(PADDING_LARGE, PADDING_MEDIUM), sticky="w")

        filter_entry = self.register_component(
            "filter", customtkinter.CTkEntry(self.frame, placeholder_text="Filter packages")
        )
        filter_entry.grid(row=1, column=0, columnspan=3, padx=PADDING_LARGE, pady=PADDING_SMALL, sticky="ew")
        filter_entry.bind("<KeyRelease>", lambda _event: self._dispatch(self.controller.on_filter, filter_entry.get()))

        self.register_component(
            "selected",
            customtkinter.CTkScrollableFrame(self.frame, label_text="Selected packages"),
        ).grid(row=2, column=0, padx=(PADDING_LARGE, PADDING_SMALL), pady=PADDING_SMALL, sticky="nsew")
        self.register_component(
            "available",
            customtkinter.CTkScrollableFrame(self.frame, label_text="Available packages"),
        ).grid(row=2, column=2, padx=(PADDING_SMALL, PADDING_LARGE), pady=PADDING_SMALL, sticky="nsew")

        self._create_transfer_buttons(row=2)
        self._create_directory_section(row=3)
        self._create_button_section(row=4)

        self.error_label = customtkinter.CTkLabel(self.frame, text="")
        self.error_label.grid(row=5, column=0, columnspan=3, padx=PADDING_LARGE, pady=(0, PADDING_MEDIUM), sticky="w")
        return self.frame

    def _create_transfer_buttons(self, row: int):
        column = customtkinter.CTkFrame(self.frame, fg_color="transparent")
        column.grid(row=row, column=1, padx=PADDING_SMALL, sticky="ns")
        buttons = (
            ("<", lambda: self._dispatch(self.controller.on_add, self._checked(self.available_boxes))),
            ("<<", lambda: self._dispatch(self.controller.on_add_all)),
            (">", lambda: self._dispatch(self.controller.on_remove, self._checked(self.selected_boxes))),
            (">>", lambda: self._dispatch(self.controller.on_remove_all)),
            ("Reset", lambda: self._dispatch(self.controller.on_reset)),
        )
        for index, (text, command) in enumerate(buttons):
            customtkinter.CTkButton(column, text=text, width=60, command=command).grid(
                row=index, column=0, pady=PADDING_SMALL
            )

    def _create_directory_section(self, row: int):
        section = customtkinter.CTkFrame(self.frame)
        section.grid(row=row, column=0, columnspan=3, padx=PADDING_LARGE, pady=PADDING_MEDIUM, sticky="ew")
        section.grid_columnconfigure(1, weight=1)
        for index, key in enumerate(TRACKED_ENV_KEYS):
            customtkinter.CTkLabel(section, text=env_display_label(key)).grid(
                row=index, column=0, padx=PADDING_MEDIUM, pady=PADDING_SMALL, sticky="w"
            )
            entry = customtkinter.CTkEntry(section)
            entry.grid(row=index, column=1, padx=PADDING_SMALL, pady=PADDING_SMALL, sticky="ew")
            self.env_entries[key] = entry
            customtkinter.CTkButton(
                section, text="Browse...", width=90, command=lambda k=key: self._browse(k)
            ).grid(row=index, column=2, padx=PADDING_MEDIUM, pady=PADDING_SMALL)

    def _create_button_section(self, row: int):
        buttons = customtkinter.CTkFrame(self.frame, fg_color="transparent")
        buttons.grid(row=row, column=0, columnspan=3, padx=PADDING_LARGE, pady=PADDING_MEDIUM, sticky="e")
        customtkinter.CTkButton(buttons, text="Cancel", command=self._on_cancel).grid(
            row=0, column=0, padx=PADDING_SMALL
        )
        customtkinter.CTkButton(buttons, text="OK", command=self._on_ok).grid(row=0, column=1, padx=PADDING_SMALL)

    @staticmethod
    def _checked(boxes: Dict[str, customtkinter.CTkCheckBox]) -> List[str]:
        return [name for name, box in boxes.items() if box.get()]

    @staticmethod
    def _fill_list(container, boxes: Dict[str, customtkinter.CTkCheckBox], rows: List[Tuple[str, str]]):
        for box in boxes.values():
            box.destroy()
        boxes.clear()
        for index, (name, label) in enumerate(rows):
            box = customtkinter.CTkCheckBox(container, text=label)
            box.grid(row=index, column=0, padx=PADDING_SMALL, pady=2, sticky="w")
            boxes[name] = box

    def render(self, selected: List[Tuple[str, str]], available: List[Tuple[str, str]], envs: Dict[str, str]):
        """Redraw both lists and the directory entries from the controller's state."""
        self._fill_list(self.get_component("selected"), self.selected_boxes, selected)
        self._fill_list(self.get_component("available"), self.available_boxes, available)
        for key, entry in self.env_entries.items():
            entry.delete(0, "end")
            entry.insert(0, envs.get(key, ""))

    def _entry_values(self) -> Dict[str, str]:
        return {key: entry.get() for key, entry in self.env_entries.items()}

    def _dispatch(self, action, *args):
        # entries are rewritten on every render; keep typed values
        self.controller.commit_envs(self._entry_values())
        action(*args)

    def _browse(self, key: str):
        self.controller.commit_envs(self._entry_values())
        folder = filedialog.askdirectory(parent=self.parent, title=f"Parent folder for {env_display_label(key)}")
        self.controller.on_folder_chosen(key, folder)

    def _on_ok(self):
        self.controller.commit_envs(self._entry_values())
        ok, message = self.controller.on_ok()
        if not ok:
            self.show_error(message)
            return
        self.clear_error()
        if self.on_close is not None:
            self.on_close()

    def _on_cancel(self):
        self.controller.on_cancel()
        if self.on_close is not None:
            self.on_close()
