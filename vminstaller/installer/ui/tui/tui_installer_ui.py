#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Terminal UI implementation for the installer."""

from typing import Optional, TYPE_CHECKING

from vminstaller.vm_common import (
    InstallerYesOrNo,
    InstallerAskForString,
    InstallerAskForPassword,
    InstallerDisplayMessage,
    UserInterfaceMode,
)
from vminstaller.vm_utils import clear_screen
from vminstaller.installer.utils.logger_utils import InstallerLogger
from vminstaller.installer.utils.summary_utils import build_install_summary_items
from vminstaller.installer.ui.shared.installer_ui import InstallerUI
from vminstaller.installer.ui.shared.menu_builder import ValueFormatter
from vminstaller.installer.ui.tui.customization_menu import CustomizationMenu

if TYPE_CHECKING:
    from vminstaller.installer.configs.constants.enums import ControlFlow
    from vminstaller.installer.core.config_document import ConfigDocument
    from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession
    from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan


class TUIInstallerUI(InstallerUI):
    """Terminal UI implementation using vm_common prompts."""

    def __init__(self, ui_mode: UserInterfaceMode = UserInterfaceMode.InteractionInput):
        """Initialize the TUI interface.

        Args:
            ui_mode: The user interface mode (InteractionInput for TUI, InteractionDialog for DUI)
        """
        super().__init__(ui_mode)

    def ask_yes_no(self, message: str, default: bool = True) -> bool:
        return InstallerYesOrNo(message, default=default, uiMode=self.ui_mode)

    def ask_string(self, prompt: str, default: str = "") -> Optional[str]:
        return InstallerAskForString(prompt, default=default, uiMode=self.ui_mode)

    def ask_password(self, prompt: str, default: str = "") -> Optional[str]:
        return InstallerAskForPassword(prompt, default=default, uiMode=self.ui_mode)

    def display_message(self, message: str) -> None:
        InstallerDisplayMessage(message, uiMode=self.ui_mode)

    def display_error(self, message: str) -> None:
        """Display an error message to the user using the shared logger."""
        InstallerLogger.error(message)

    def negotiate(self, session: "CustomizationSession") -> Optional["CustomizationResult"]:
        """Run the numbered customization menu until the operator accepts or cancels."""
        return CustomizationMenu(session, ui_mode=self.ui_mode).run()

    def show_final_configuration_summary(
        self,
        doc: "ConfigDocument",
        plan: "InstallPlan",
        paths: "InstallPaths",
        control_flow: "ControlFlow",
    ) -> bool:
        """Show final installation summary and get user confirmation to proceed."""
        summary_items = build_install_summary_items(doc, plan, paths, control_flow)
        is_dry_run = control_flow.is_dry_run()

        clear_screen()

        summary_lines = []
        summary_lines.append("=" * 60)
        summary_lines.append("FINAL INSTALLATION SUMMARY" + (" (DRY RUN)" if is_dry_run else ""))
        summary_lines.append("=" * 60)
        for label, value in summary_items:
            summary_lines.append(f"{label:<30}: {ValueFormatter.format_summary_value(label, value)}")
        summary_lines.append("=" * 60)

        print("\n".join(summary_lines))

        prompt = (
            "Proceed with dry-run using the above configuration?"
            if is_dry_run
            else "Proceed with installation using the above configuration?"
        )
        return self.ask_yes_no(prompt, default=False)
