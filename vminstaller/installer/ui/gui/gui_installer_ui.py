#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Graphical (customtkinter) customization surface; prompts stay on the terminal."""

from typing import Optional, TYPE_CHECKING

import customtkinter

from vminstaller.vm_common import UserInterfaceMode
from vminstaller.vm_constants import VMINSTALLER_VERSION
from vminstaller.installer.ui.gui.controllers.customization_controller import CustomizationController
from vminstaller.installer.ui.gui.views.customization_view import CustomizationView
from vminstaller.installer.ui.tui.tui_installer_ui import TUIInstallerUI

if TYPE_CHECKING:
    from vminstaller.installer.core.customization import CustomizationResult, CustomizationSession


def run_customization_window(session: "CustomizationSession") -> Optional["CustomizationResult"]:
    """Show the customization window and block until it is closed.

    Closing the window without OK cancels the session.
    """
    customtkinter.set_appearance_mode("system")
    root = customtkinter.CTk()
    root.title(f"VM Installer {VMINSTALLER_VERSION} - Customize")
    root.geometry("960x720")

    controller = CustomizationController(session)

    def _close():
        root.quit()
        root.destroy()

    def _window_closed():
        controller.on_cancel()
        _close()

    CustomizationView(root, controller, on_close=_close)
    root.protocol("WM_DELETE_WINDOW", _window_closed)
    root.mainloop()

    if session.is_open:
        controller.on_cancel()
    return controller.result


class GUIInstallerUI(TUIInstallerUI):
    """Terminal prompts with a customtkinter window for the customization phase."""

    def __init__(self, ui_mode: UserInterfaceMode = UserInterfaceMode.InteractionInput):
        super().__init__(ui_mode)

    def negotiate(self, session: "CustomizationSession") -> Optional["CustomizationResult"]:
        return run_customization_window(session)
