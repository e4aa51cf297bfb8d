#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Windows-specific installer implementation: configure the host and hand off to Boxstarter."""

import ctypes
import os
import shutil
from typing import List, Optional

try:  # Windows-only
    import winreg
except ImportError:
    winreg = None

from vminstaller.vm_constants import (
    ENV_KEY_COMMON_DIR,
    LAYOUT_FILE_NAME,
    CONFIG_FILE_NAME,
    PLATFORM_WINDOWS,
    TRACKED_ENV_KEYS,
)
from vminstaller.installer.configs.constants.constants import CHOCOLATEY_CACHE_DIR, MACHINE_ENVIRONMENT_KEY
from vminstaller.installer.configs.constants.enums import EnvScope, InstallerResult
from vminstaller.installer.core.config_document import ConfigDocument, expand_env_value, expanded_envs
from vminstaller.installer.core.config_store import persist_document
from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan
from vminstaller.installer.utils.exceptions import ConfigDocumentError
from vminstaller.installer.utils.logger_utils import InstallerLogger

from .base import BaseInstaller
from .utils.host_configuration import HostConfigurationWriter
from .utils.host_facts import WindowsHostFacts
from .utils.install_engine import BoxstarterEngine

WM_SETTINGCHANGE = 0x001A
HWND_BROADCAST = 0xFFFF
SMTO_ABORTIFHUNG = 0x0002


def broadcast_environment_change() -> None:
    """Tell running programs (Explorer in particular) that the environment changed."""
    result = ctypes.c_ulong()
    ctypes.windll.user32.SendMessageTimeoutW(
        HWND_BROADCAST,
        WM_SETTINGCHANGE,
        0,
        "Environment",
        SMTO_ABORTIFHUNG,
        5000,
        ctypes.byref(result),
    )


class WindowsInstaller(BaseInstaller):
    """Windows installer: reboot-resilient installation through Boxstarter."""

    def __init__(self, ui, debug: bool = False, control_flow=None, settings=None, engine=None):
        super().__init__(ui, debug, control_flow, settings)
        self.engine = engine or BoxstarterEngine(self)
        if self.debug:
            InstallerLogger.debug(f"{PLATFORM_WINDOWS} installer initialized ({self.control_flow.name})")

    def host_facts(self) -> WindowsHostFacts:
        return WindowsHostFacts(self)

    def set_environment_variable(self, name: str, value: str, scope: EnvScope = EnvScope.MACHINE) -> bool:
        if scope is EnvScope.MACHINE:
            try:
                with winreg.OpenKey(
                    winreg.HKEY_LOCAL_MACHINE, MACHINE_ENVIRONMENT_KEY, 0, winreg.KEY_READ | winreg.KEY_WRITE
                ) as key:
                    winreg.SetValueEx(key, name, 0, winreg.REG_SZ, value)
            except OSError as e:
                InstallerLogger.error(f"Failed to set machine environment variable {name}: {e}")
                return False
            broadcast_environment_change()
        os.environ[name] = value
        return True

    def set_registry_value(self, key: str, value_name: str, value) -> bool:
        try:
            with winreg.CreateKeyEx(winreg.HKEY_LOCAL_MACHINE, key, 0, winreg.KEY_WRITE) as handle:
                if isinstance(value, int):
                    winreg.SetValueEx(handle, value_name, 0, winreg.REG_DWORD, value)
                else:
                    winreg.SetValueEx(handle, value_name, 0, winreg.REG_SZ, str(value))
            return True
        except OSError as e:
            InstallerLogger.warning(f"Failed to set HKLM\\{key}\\{value_name}: {e}")
            return False

    def build_host_configuration(self, doc: ConfigDocument) -> HostConfigurationWriter:
        """Steps 3-6 of the install sequence as one auditable write set."""
        writer = HostConfigurationWriter(self)
        writer.disable_updates()
        writer.configure_package_manager(
            list(self.settings.package_sources),
            expand_env_value(CHOCOLATEY_CACHE_DIR, doc.envs),
        )
        writer.disable_power_timeouts()
        writer.export_environment(expanded_envs(doc, TRACKED_ENV_KEYS))
        return writer

    def shared_destinations(self, doc: ConfigDocument, paths: InstallPaths) -> List[str]:
        common_dir = expand_env_value(doc.envs.get(ENV_KEY_COMMON_DIR, ""), doc.envs)
        if not common_dir or "%" in common_dir:
            raise ConfigDocumentError(paths.config_path, f"{ENV_KEY_COMMON_DIR} does not resolve to a directory")
        return [os.path.join(common_dir, CONFIG_FILE_NAME)]

    def _persist_shared(self, doc: ConfigDocument, paths: InstallPaths) -> bool:
        destinations = self.shared_destinations(doc, paths)
        persist_document(doc, destinations, self.control_flow)
        if paths.layout_path:
            layout_dest = os.path.join(os.path.dirname(destinations[0]), LAYOUT_FILE_NAME)
            if not self.should_write_files():
                InstallerLogger.info(self.control_flow.would(f"copy {paths.layout_path} to {layout_dest}"))
            elif os.path.isfile(paths.layout_path):
                try:
                    shutil.copyfile(paths.layout_path, layout_dest)
                except OSError as e:
                    InstallerLogger.error(f"Failed to copy layout file to {layout_dest}: {e}")
                    return False
            else:
                InstallerLogger.warning(f"Layout file {paths.layout_path} not found; skipping")
        return True

    def install(self, doc: ConfigDocument, plan: InstallPlan, paths: InstallPaths) -> bool:
        """Execute the full Windows installation flow honoring ControlFlow.

        Order:
          1) Boxstarter runtime (fatal)
          2) Chocolatey version (soft)
          3-6) host configuration: updates (best effort), package manager,
               power, machine environment
          6a) shared-state package, then the document (and layout) into COMMON_DIR
          7) Install-BoxstarterPackage for the bootstrap package
        """
        # 1) installation engine runtime
        label = "Boxstarter"
        InstallerLogger.start(label)
        if self.should_run_install_steps():
            status, message = self.engine.ensure_runtime(self.settings.boxstarter_min_version)
            InstallerLogger.end(label, status, message)
            if status == InstallerResult.FAILURE:
                return False
        else:
            InstallerLogger.info(f"Dry run/config-only: would ensure Boxstarter {self.settings.boxstarter_min_version} or newer")
            InstallerLogger.end(label, InstallerResult.SKIPPED)

        # 2) package manager version
        label = "Chocolatey"
        InstallerLogger.start(label)
        if self.should_run_install_steps():
            status, message = self.engine.ensure_package_manager(self.settings.chocolatey_min_version)
            if status == InstallerResult.FAILURE:
                InstallerLogger.warning(message)
            InstallerLogger.end(label, status, message)
        else:
            InstallerLogger.info(f"Dry run/config-only: would ensure Chocolatey {self.settings.chocolatey_min_version} or newer")
            InstallerLogger.end(label, InstallerResult.SKIPPED)

        # 3-6) host configuration
        status, message = self.build_host_configuration(doc).apply()
        if status == InstallerResult.FAILURE:
            InstallerLogger.error(message)
            return False

        # 6a) shared-state package, then the shared copy of the document
        label = "Shared configuration"
        InstallerLogger.start(label)
        if self.should_run_install_steps():
            sources = ";".join(name for name, _url, _priority in self.settings.package_sources)
            status, message = self.engine.install_package(self.settings.shared_state_package, sources)
            if status == InstallerResult.FAILURE:
                InstallerLogger.end(label, status, message)
                return False
        else:
            InstallerLogger.info(f"Dry run/config-only: would install {self.settings.shared_state_package}")
        if not self._persist_shared(doc, paths):
            InstallerLogger.end(label, InstallerResult.FAILURE)
            return False
        InstallerLogger.end(label, InstallerResult.SUCCESS)

        # 7) hand off to the installation engine
        label = "Install-BoxstarterPackage"
        InstallerLogger.start(label)
        if not self.should_run_install_steps():
            InstallerLogger.info(f"Dry run/config-only: would install {plan.package_name} through Boxstarter")
            InstallerLogger.end(label, InstallerResult.SKIPPED)
            return True
        err = self.engine.install(plan)
        if err != 0:
            InstallerLogger.end(label, InstallerResult.FAILURE, f"exit code {err}")
            return False
        InstallerLogger.end(label, InstallerResult.SUCCESS, plan.package_name)
        return True
