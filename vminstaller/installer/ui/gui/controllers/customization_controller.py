#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Customization Controller
========================

Maps events from the customization window onto CustomizationSession transitions.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from vminstaller.installer.core.catalog import CatalogItem
from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession
from vminstaller.installer.ui.gui.controllers.base_controller import BaseController
from vminstaller.installer.ui.shared.labels import env_display_label


class CustomizationController(BaseController):
    """Controller for the package selection and directory customization window"""

    def __init__(self, session: CustomizationSession):
        super().__init__(session)
        self.filter_text = ""
        self.result: Optional[CustomizationResult] = None

    @property
    def session(self) -> CustomizationSession:
        return self.model

    def _matches(self, item: CatalogItem) -> bool:
        return (not self.filter_text) or (self.filter_text.lower() in item.name.lower())

    def selected_rows(self) -> List[Tuple[str, str]]:
        return [(item.name, item.label()) for item in self.session.selected_items() if self._matches(item)]

    def available_rows(self) -> List[Tuple[str, str]]:
        return [(item.name, item.label()) for item in self.session.available_items() if self._matches(item)]

    def refresh_view(self):
        if self.view is not None:
            self.view.render(self.selected_rows(), self.available_rows(), self.session.envs())

    # selection events
    def on_add(self, names: Iterable[str]) -> None:
        self.session.add_selected(names)
        self.refresh_view()

    def on_add_all(self) -> None:
        self.session.add_all()
        self.refresh_view()

    def on_remove(self, names: Iterable[str]) -> None:
        self.session.remove_selected(names)
        self.refresh_view()

    def on_remove_all(self) -> None:
        self.session.remove_all()
        self.refresh_view()

    def on_reset(self) -> None:
        self.session.reset()
        self.refresh_view()

    def on_filter(self, text: str) -> None:
        self.filter_text = (text or "").strip()
        self.refresh_view()

    # directory events
    def on_env_changed(self, key: str, value: str) -> None:
        self.session.set_env(key, value)

    def on_folder_chosen(self, key: str, folder: str) -> Optional[str]:
        """Apply a folder picked with the Browse button; an empty pick leaves the value alone."""
        if not folder:
            return None
        value = self.session.set_env_from_folder(key, folder)
        self.refresh_view()
        return value

    def commit_envs(self, values: Dict[str, str]) -> None:
        for key, value in values.items():
            self.on_env_changed(key, value)

    def validate(self):
        empty = [env_display_label(key) for key, value in self.session.envs().items() if not value]
        if empty:
            return False, f"A value is required for: {', '.join(empty)}"
        return True, ""

    # closing events
    def on_ok(self) -> Tuple[bool, str]:
        ok, message = self.validate()
        if ok:
            self.result = self.session.accept()
        return ok, message

    def on_cancel(self) -> None:
        if self.session.is_open:
            self.session.cancel()
        self.result = None
