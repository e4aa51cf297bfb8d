#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
DUI (python3-dialog) implementation for installer UI.
"""

from typing import Optional, TYPE_CHECKING

from vminstaller.vm_common import (
    InstallerYesOrNo,
    InstallerAskForString,
    InstallerAskForPassword,
    InstallerDisplayMessage,
    UserInterfaceMode,
)
from vminstaller.installer.utils.logger_utils import InstallerLogger
from vminstaller.installer.utils.summary_utils import build_install_summary_items

from vminstaller.installer.ui.shared.installer_ui import InstallerUI
from vminstaller.installer.ui.shared.menu_builder import ValueFormatter
from vminstaller.installer.ui.dui.dialog_customization import DialogCustomization

if TYPE_CHECKING:
    from vminstaller.installer.configs.constants.enums import ControlFlow
    from vminstaller.installer.core.config_document import ConfigDocument
    from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession
    from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan


class DialogInstallerUI(InstallerUI):
    """Dialog-based User Interface aligned with the TUI hierarchy."""

    def __init__(self, ui_mode: UserInterfaceMode = UserInterfaceMode.InteractionDialog):
        super().__init__(ui_mode)

    # primitive prompts are thin wrappers around the shared helpers
    def ask_yes_no(self, message: str, default: bool = True) -> bool:
        return InstallerYesOrNo(message, default=default, uiMode=self.ui_mode)

    def ask_string(self, prompt: str, default: str = "") -> Optional[str]:
        return InstallerAskForString(prompt, default=default, uiMode=self.ui_mode)

    def ask_password(self, prompt: str, default: str = "") -> Optional[str]:
        return InstallerAskForPassword(prompt, default=default, uiMode=self.ui_mode)

    def display_message(self, message: str) -> None:
        InstallerDisplayMessage(message, uiMode=self.ui_mode)

    def display_error(self, message: str) -> None:
        InstallerLogger.error(message)

    # customization phase
    def negotiate(self, session: "CustomizationSession") -> Optional["CustomizationResult"]:
        return DialogCustomization(session, ui_mode=self.ui_mode).run()

    def show_final_configuration_summary(
        self,
        doc: "ConfigDocument",
        plan: "InstallPlan",
        paths: "InstallPaths",
        control_flow: "ControlFlow",
    ) -> bool:
        items = build_install_summary_items(doc, plan, paths, control_flow)
        is_dry_run = control_flow.is_dry_run()

        while True:
            # present a single yes/no dialog that includes the full summary
            lines = [
                "FINAL INSTALLATION SUMMARY" + (" (DRY RUN)" if is_dry_run else ""),
                "",
            ]
            for label, value in items:
                lines.append(f"{label}: {ValueFormatter.format_summary_value(label, value)}")
            lines.append("")
            prompt = (
                "Proceed with dry-run using the above configuration?"
                if is_dry_run
                else "Proceed with installation using the above configuration?"
            )
            lines.append(prompt)
            proceed_response = self.ask_yes_no("\n".join(lines), default=False)
            if (not proceed_response) and (not is_dry_run):
                if self.ask_yes_no(
                    "The customized configuration will be discarded, are you sure?",
                    default=False,
                ):
                    break
            else:
                break

        return proceed_response
