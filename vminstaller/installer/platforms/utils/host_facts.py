#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Windows host facts for the preflight checks (read-only registry, WMI and PowerShell queries)."""

import ctypes
import getpass
import os
import platform
from typing import Optional, Tuple, TYPE_CHECKING

try:  # Windows-only
    import winreg
except ImportError:
    winreg = None

from vminstaller.vm_common import disk_free_bytes
from vminstaller.vm_utils import first_line
from vminstaller.installer.configs.constants.constants import (
    DEFENDER_FEATURES_KEY,
    DEFENDER_TAMPER_ON_VALUES,
    DEFENDER_TAMPER_VALUE,
)
from vminstaller.installer.core.validation import HostFacts

if TYPE_CHECKING:
    from vminstaller.installer.platforms.base import BaseInstaller


def read_hklm_value(key: str, value_name: str):
    """Return a value under HKEY_LOCAL_MACHINE, or None when the key or value is absent."""
    if winreg is None:
        raise OSError("the Windows registry is not available on this platform")
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key, 0, winreg.KEY_READ) as handle:
            value, _reg_type = winreg.QueryValueEx(handle, value_name)
            return value
    except FileNotFoundError:
        return None


class WindowsHostFacts(HostFacts):
    def __init__(self, platform_installer: "BaseInstaller"):
        self.platform = platform_installer

    def _powershell_line(self, script: str, bypass_policy: bool = True) -> str:
        err, out = self.platform.run_powershell(script, bypass_policy=bypass_policy)
        line = first_line(out)
        if err != 0 or line is None:
            raise RuntimeError(f"'{script}' failed ({err}): {line or 'no output'}")
        return line

    def powershell_version(self) -> Optional[str]:
        return self._powershell_line("$PSVersionTable.PSVersion.ToString()")

    def is_elevated(self) -> bool:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())

    def execution_policy(self) -> Optional[str]:
        # without -ExecutionPolicy Bypass so the operator's effective policy is reported
        return self._powershell_line("Get-ExecutionPolicy", bypass_policy=False)

    def username(self) -> str:
        return os.environ.get("USERNAME") or getpass.getuser()

    def os_version(self) -> Optional[str]:
        return platform.version()

    def manufacturer_model(self) -> Tuple[str, str]:
        line = self._powershell_line(
            "Get-CimInstance -ClassName Win32_ComputerSystem | "
            'ForEach-Object { "$($_.Manufacturer)|$($_.Model)" }'
        )
        manufacturer, _, model = line.partition("|")
        return manufacturer.strip(), model.strip()

    def free_disk_bytes(self) -> int:
        return disk_free_bytes()

    def tamper_protection_enabled(self) -> bool:
        value = read_hklm_value(DEFENDER_FEATURES_KEY, DEFENDER_TAMPER_VALUE)
        return value in DEFENDER_TAMPER_ON_VALUES

    def realtime_protection_enabled(self) -> bool:
        line = self._powershell_line("(Get-MpComputerStatus).RealTimeProtectionEnabled")
        return line.strip().lower() == "true"
