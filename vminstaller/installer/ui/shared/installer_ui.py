#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Abstract base class for installer UI implementations."""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from vminstaller.vm_common import UserInterfaceMode

if TYPE_CHECKING:
    from vminstaller.installer.configs.constants.enums import ControlFlow
    from vminstaller.installer.core.config_document import ConfigDocument
    from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession
    from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan


class InstallerUI(ABC):
    """Abstract base class for installer UI implementations.

    This interface decouples the installer logic from the presentation layer,
    allowing the same installer logic to work with TUI, dialog, or GUI surfaces.
    """

    def __init__(self, ui_mode: UserInterfaceMode = UserInterfaceMode.InteractionInput):
        """Initialize the UI interface.

        Args:
            ui_mode: The user interface mode for this implementation
        """
        self.ui_mode = ui_mode

    @abstractmethod
    def ask_yes_no(self, message: str, default: bool = True) -> bool:
        """Ask the user a yes/no question.

        Args:
            message: The question to ask the user
            default: Default answer if user just presses enter

        Returns:
            True for yes, False for no
        """
        pass

    @abstractmethod
    def ask_string(self, prompt: str, default: str = "") -> Optional[str]:
        """Ask the user for a string input.

        Returns:
            The user's input string, or None if cancelled
        """
        pass

    @abstractmethod
    def ask_password(self, prompt: str, default: str = "") -> Optional[str]:
        """Ask the user for a password (hidden input).

        Returns:
            The user's password input, or None if cancelled
        """
        pass

    @abstractmethod
    def display_message(self, message: str) -> None:
        pass

    @abstractmethod
    def display_error(self, message: str) -> None:
        pass

    @abstractmethod
    def negotiate(self, session: "CustomizationSession") -> Optional["CustomizationResult"]:
        """Let the operator edit the package selection and directory bindings.

        Implementations drive the session's transitions and finish by calling
        session.accept() (returning its result) or session.cancel() (returning None).
        """
        pass

    @abstractmethod
    def show_final_configuration_summary(
        self,
        doc: "ConfigDocument",
        plan: "InstallPlan",
        paths: "InstallPaths",
        control_flow: "ControlFlow",
    ) -> bool:
        """Show what is about to be installed and get user confirmation to proceed.

        Returns:
            True if user confirms to proceed with installation, False otherwise
        """
        pass

    def ask_credential_secret(self, username: str) -> Optional[str]:
        """Ask for the auto-logon password twice until both entries match; None if cancelled."""
        while True:
            secret = self.ask_password(f"Password for {username} (used to log on automatically after reboots)")
            if secret is None:
                return None
            confirm = self.ask_password("Confirm password")
            if confirm is None:
                return None
            if secret == confirm:
                return secret
            self.display_error("Passwords do not match")
