#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Thin wrapper over the installation engine (Boxstarter) and its package manager (Chocolatey).

The engine is a black box: this module only checks versions, bootstraps it,
lists installed/available packages and hands a package to it.
"""

import os
from typing import List, Optional, Set, Tuple, TYPE_CHECKING

from vminstaller.vm_constants import ENV_KEY_COMMON_DIR
from vminstaller.vm_utils import first_line, powershell_quote, version_at_least
from vminstaller.installer.configs.constants.constants import (
    BOXSTARTER_BOOTSTRAP_URL,
    BOXSTARTER_LOG,
    BOXSTARTER_MODULE,
    CHOCOLATEY_EXE,
    CHOCOLATEY_LOG,
    COMMON_DIR_LOG_NAME,
    ENGINE_BOOTSTRAP_ATTEMPTS,
)
from vminstaller.installer.configs.constants.enums import InstallerResult
from vminstaller.installer.core.catalog import CatalogItem
from vminstaller.installer.core.config_document import expand_env_value
from vminstaller.installer.utils.exceptions import EngineError
from vminstaller.installer.utils.logger_utils import InstallerLogger

if TYPE_CHECKING:
    from vminstaller.installer.core.install_plan import InstallPlan
    from vminstaller.installer.platforms.base import BaseInstaller


def parse_limited_output(lines: List[str]) -> List[CatalogItem]:
    """Parse `choco ... -r` output ("name|version" per line)."""
    items = []
    for line in lines:
        line = line.strip()
        if not line or "|" not in line:
            continue
        name, _, version = line.partition("|")
        name = name.strip()
        if name:
            items.append(CatalogItem(name, version.strip()))
    return items


class BoxstarterEngine:
    """Installation engine collaborator; every command goes through the platform installer."""

    def __init__(self, platform: "BaseInstaller"):
        self.platform = platform

    # versions
    def boxstarter_version(self) -> Optional[str]:
        err, out = self.platform.run_powershell(
            f"(Get-Module -ListAvailable -Name {BOXSTARTER_MODULE} | Sort-Object Version -Descending | "
            "Select-Object -First 1).Version.ToString()"
        )
        return first_line(out) if err == 0 else None

    def package_manager_version(self) -> Optional[str]:
        err, out = self.platform.run_process([CHOCOLATEY_EXE, "--version"], stderr=False)
        return first_line(out) if err == 0 else None

    def ensure_runtime(self, min_version: str) -> Tuple[InstallerResult, str]:
        """Make sure Boxstarter >= min_version is present, bootstrapping it once if not."""
        current = self.boxstarter_version()
        if current and version_at_least(current, min_version):
            return InstallerResult.SUCCESS, f"Boxstarter {current} present"

        InstallerLogger.info(f"Boxstarter {current or 'not installed'}; bootstrapping {min_version} or newer")
        for attempt in range(ENGINE_BOOTSTRAP_ATTEMPTS):
            err, out = self.platform.run_powershell(
                "[Net.ServicePointManager]::SecurityProtocol = [Net.SecurityProtocolType]::Tls12; "
                f"iex ((New-Object System.Net.WebClient).DownloadString({powershell_quote(BOXSTARTER_BOOTSTRAP_URL)})); "
                "Get-Boxstarter -Force"
            )
            if err != 0:
                InstallerLogger.warning(f"Boxstarter bootstrap attempt {attempt + 1} failed: {' '.join(out[-3:])}")
        current = self.boxstarter_version()
        if current and version_at_least(current, min_version):
            return InstallerResult.SUCCESS, f"Boxstarter {current} installed"
        return InstallerResult.FAILURE, f"Boxstarter {min_version} or newer could not be installed"

    def ensure_package_manager(self, min_version: str) -> Tuple[InstallerResult, str]:
        """Upgrade Chocolatey when it is older than min_version; failure is reported, not raised."""
        current = self.package_manager_version()
        if current and version_at_least(current, min_version):
            return InstallerResult.SUCCESS, f"Chocolatey {current} present"

        InstallerLogger.info(f"Chocolatey {current or 'unknown'} is older than {min_version}; upgrading")
        err, out = self.platform.run_process([CHOCOLATEY_EXE, "upgrade", "chocolatey", "-y", "--no-progress"])
        current = self.package_manager_version()
        if err == 0 and current and version_at_least(current, min_version):
            return InstallerResult.SUCCESS, f"Chocolatey upgraded to {current}"
        return InstallerResult.FAILURE, f"Chocolatey upgrade failed ({current or 'unknown'}): {first_line(out) or err}"

    # queries
    def query_installed(self) -> Set[str]:
        err, out = self.platform.run_process([CHOCOLATEY_EXE, "list", "-r"], stderr=False)
        if err != 0:
            raise EngineError(f"Unable to list installed packages: {first_line(out) or err}")
        return {item.name for item in parse_limited_output(out)}

    def query_index(self, source_url: str) -> List[CatalogItem]:
        err, out = self.platform.run_process([CHOCOLATEY_EXE, "search", "-r", "--source", source_url], stderr=False)
        if err != 0:
            raise EngineError(f"Unable to query package index {source_url}: {first_line(out) or err}")
        return parse_limited_output(out)

    # installation
    def install_package(self, name: str, sources: str) -> Tuple[InstallerResult, str]:
        """Install a single package directly with the package manager (no reboot handling)."""
        err, out = self.platform.run_process(
            [CHOCOLATEY_EXE, "install", name, "-y", "--no-progress", "--source", sources]
        )
        if err != 0:
            return InstallerResult.FAILURE, f"{name}: {' '.join(out[-3:]) or err}"
        return InstallerResult.SUCCESS, f"{name} installed"

    def install(self, plan: "InstallPlan") -> int:
        """Hand the bootstrap package to Install-BoxstarterPackage and wait for it.

        The credential secret, when there is one, is written to the child's stdin.
        """
        lines = [f"Import-Module {BOXSTARTER_MODULE}"]
        secret = None
        if plan.credential is not None:
            secret = plan.credential.secret
            lines.append("$secret = ConvertTo-SecureString ([Console]::In.ReadLine()) -AsPlainText -Force")
            lines.append(
                "$cred = New-Object System.Management.Automation.PSCredential("
                f"{powershell_quote(plan.credential.username)}, $secret)"
            )
        else:
            lines.append("$Boxstarter.NoPassword = $true")
        lines.append(f"$Boxstarter.RebootOk = {'$true' if plan.allow_reboot else '$false'}")

        invoke = f"Install-BoxstarterPackage -PackageName {powershell_quote(plan.package_name)}"
        if plan.credential is not None:
            invoke += " -Credential $cred"
        if not plan.allow_reboot:
            invoke += " -DisableReboots"
        lines.append(invoke)

        err, out = self.platform.run_powershell("; ".join(lines), stdin=(secret + "\n") if secret is not None else None)
        for line in out[-10:]:
            InstallerLogger.debug(line)
        return err


def engine_log_locations(envs: Optional[dict] = None, environ=None) -> List[str]:
    """Where the engine and packages record their own failures."""
    environ = os.environ if environ is None else environ
    locations = [expand_env_value(BOXSTARTER_LOG, envs, environ), expand_env_value(CHOCOLATEY_LOG, envs, environ)]
    if envs and ENV_KEY_COMMON_DIR in envs:
        common_dir = expand_env_value(envs[ENV_KEY_COMMON_DIR], envs, environ)
        locations.append(f"{common_dir}\\{COMMON_DIR_LOG_NAME}")
    return locations
