#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Interaction surfaces for the installer.

The GUI surface is imported on demand by the orchestrator because it needs a
display and the customtkinter runtime.
"""

from vminstaller.installer.ui.shared.installer_ui import InstallerUI
from vminstaller.installer.ui.tui.tui_installer_ui import TUIInstallerUI
from vminstaller.installer.ui.dui.dui_installer_ui import DialogInstallerUI

__all__ = ["InstallerUI", "TUIInstallerUI", "DialogInstallerUI"]
