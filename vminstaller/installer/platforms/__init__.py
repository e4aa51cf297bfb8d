#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Platform-specific installer implementations."""

from vminstaller.vm_common import get_platform_name

from .base import BaseInstaller
from .windows import WindowsInstaller


def get_platform_installer(
    ui,
    debug: bool = False,
    control_flow=None,
    settings=None,
) -> BaseInstaller:
    """Determine the current host platform and return the matching installer."""

    platform_name = get_platform_name()

    if platform_name == "windows":
        return WindowsInstaller(ui, debug, control_flow=control_flow, settings=settings)
    else:
        raise NotImplementedError(f"Platform '{platform_name}' is not supported; this installer provisions Windows VMs")


__all__ = [
    "BaseInstaller",
    "WindowsInstaller",
    "get_platform_installer",
]
