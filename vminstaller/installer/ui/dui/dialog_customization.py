#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Dialog-based customization of the package selection and directories using python3-dialog."""

from typing import Optional, TYPE_CHECKING

from vminstaller.vm_common import (
    AskForStrings,
    InstallerChooseMultiple,
    InstallerYesOrNo,
    SelectDirectory,
    UserInputDefaultsBehavior,
    UserInterfaceMode,
    DialogBackException,
    DialogCanceledException,
)
from vminstaller.vm_constants import TRACKED_ENV_KEYS
from vminstaller.installer.utils.logger_utils import InstallerLogger
from vminstaller.installer.ui.shared.labels import env_display_label

if TYPE_CHECKING:
    from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession


class DialogCustomization:
    def __init__(
        self,
        session: "CustomizationSession",
        ui_mode: UserInterfaceMode = UserInterfaceMode.InteractionDialog,
    ) -> None:
        self.session = session
        self.ui_mode = ui_mode

    def run(self) -> Optional["CustomizationResult"]:
        try:
            while True:
                self._choose_packages()
                self._choose_directories()
                if InstallerYesOrNo(
                    self._summary_text(),
                    default=True,
                    uiMode=self.ui_mode,
                    yesLabel="Accept",
                    noLabel="Revise",
                ):
                    return self.session.accept()
        except (KeyboardInterrupt, DialogCanceledException, DialogBackException):
            InstallerLogger.info("Customization cancelled")
            if self.session.is_open:
                self.session.cancel()
            return None

    def _choose_packages(self) -> None:
        selected = self.session.selected_names()
        items = sorted(
            self.session.selected_items() + self.session.available_items(),
            key=lambda i: i.name.lower(),
        )
        choices = [(item.name, item.version or "", item.name in selected) for item in items]
        if not choices:
            return
        reply = set(
            InstallerChooseMultiple(
                "Select the packages to install (space toggles, Enter accepts)",
                choices=choices,
                uiMode=self.ui_mode,
            )
        )
        self.session.remove_selected(selected - reply)
        self.session.add_selected(reply - selected)

    def _choose_directories(self) -> None:
        if InstallerYesOrNo(
            "Browse for the parent folder of each installation directory?",
            default=False,
            uiMode=self.ui_mode,
        ):
            for key in TRACKED_ENV_KEYS:
                folder = SelectDirectory(f"Parent folder for {env_display_label(key)}", uiMode=self.ui_mode)
                if folder:
                    self.session.set_env_from_folder(key, folder)

        envs = self.session.envs()
        values = AskForStrings(
            "Installation directories (%VAR% references are expanded at install time)",
            [env_display_label(key) for key in TRACKED_ENV_KEYS],
            defaults=[envs[key] for key in TRACKED_ENV_KEYS],
            defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
            uiMode=self.ui_mode,
        )
        for key, value in zip(TRACKED_ENV_KEYS, values):
            if value:
                self.session.set_env(key, value)

    def _summary_text(self) -> str:
        lines = [f"Selected packages ({len(self.session.selected_names())}):"]
        names = [item.name for item in self.session.selected_items()]
        lines.append("  " + (", ".join(names) if names else "(none)"))
        lines.append("")
        for key, value in self.session.envs().items():
            lines.append(f"{env_display_label(key)}: {value}")
        lines.append("")
        lines.append("Accept this customization?")
        return "\n".join(lines)
