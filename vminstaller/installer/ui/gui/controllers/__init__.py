#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Controllers package for the VM installer GUI
"""

from vminstaller.installer.ui.gui.controllers.base_controller import BaseController
from vminstaller.installer.ui.gui.controllers.customization_controller import CustomizationController

__all__ = ["BaseController", "CustomizationController"]
