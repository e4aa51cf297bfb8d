#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Host-wide configuration applied once, from one place, before the engine hand-off.

HostConfigurationWriter collects every write (update services, package manager
settings, power timeouts, machine environment) keyed by its target, logs the
full write set and then applies it. Re-adding a target replaces the earlier
write, and every write overwrites host state, so applying twice is harmless.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, TYPE_CHECKING

from vminstaller.vm_constants import PROFILE_KEY, PROFILE_NAME
from vminstaller.installer.configs.constants.constants import (
    CHOCOLATEY_EXE,
    CHOCOLATEY_FEATURES,
    POWER_SOURCES,
    POWER_TIMEOUT_SETTINGS,
    STORE_AUTO_DOWNLOAD_DISABLED,
    STORE_AUTO_DOWNLOAD_VALUE,
    STORE_POLICY_KEY,
    WINDOWS_UPDATE_SERVICE,
)
from vminstaller.installer.configs.constants.enums import EnvScope, InstallerResult
from vminstaller.installer.utils.logger_utils import InstallerLogger

if TYPE_CHECKING:
    from vminstaller.installer.platforms.base import BaseInstaller

CATEGORY_UPDATES = "Disable automatic updates"
CATEGORY_PACKAGE_MANAGER = "Package manager settings"
CATEGORY_POWER = "Power settings"
CATEGORY_ENVIRONMENT = "Machine environment"


@dataclass(frozen=True)
class HostWrite:
    category: str
    target: str
    description: str
    best_effort: bool = False
    command: Tuple[str, ...] = ()
    registry: Optional[Tuple[str, str, object]] = None
    environment: Optional[Tuple[str, str]] = None

    def apply(self, platform: "BaseInstaller") -> bool:
        if self.environment is not None:
            name, value = self.environment
            return platform.set_environment_variable(name, value, EnvScope.MACHINE)
        if self.registry is not None:
            key, value_name, value = self.registry
            return platform.set_registry_value(key, value_name, value)
        err, out = platform.run_process(list(self.command))
        if err != 0:
            InstallerLogger.debug(f"{self.description} failed ({err}): {out}")
        return err == 0


@dataclass
class HostConfigurationWriter:
    platform: "BaseInstaller"
    _writes: Dict[str, HostWrite] = field(default_factory=dict)

    def _add(self, write: HostWrite) -> None:
        self._writes[write.target] = write

    # collection
    def disable_updates(self) -> "HostConfigurationWriter":
        self._add(
            HostWrite(
                CATEGORY_UPDATES,
                f"service:{WINDOWS_UPDATE_SERVICE}:stop",
                f"stop {WINDOWS_UPDATE_SERVICE}",
                best_effort=True,
                command=("sc.exe", "stop", WINDOWS_UPDATE_SERVICE),
            )
        )
        self._add(
            HostWrite(
                CATEGORY_UPDATES,
                f"service:{WINDOWS_UPDATE_SERVICE}:start",
                f"disable {WINDOWS_UPDATE_SERVICE}",
                best_effort=True,
                command=("sc.exe", "config", WINDOWS_UPDATE_SERVICE, "start=", "disabled"),
            )
        )
        self._add(
            HostWrite(
                CATEGORY_UPDATES,
                f"registry:{STORE_POLICY_KEY}\\{STORE_AUTO_DOWNLOAD_VALUE}",
                "disable Microsoft Store automatic downloads",
                best_effort=True,
                registry=(STORE_POLICY_KEY, STORE_AUTO_DOWNLOAD_VALUE, STORE_AUTO_DOWNLOAD_DISABLED),
            )
        )
        return self

    def configure_package_manager(
        self, sources: List[Tuple[str, str, int]], cache_dir: str
    ) -> "HostConfigurationWriter":
        for feature in CHOCOLATEY_FEATURES:
            self._add(
                HostWrite(
                    CATEGORY_PACKAGE_MANAGER,
                    f"choco:feature:{feature}",
                    f"enable Chocolatey feature {feature}",
                    command=(CHOCOLATEY_EXE, "feature", "enable", "--name", feature),
                )
            )
        for name, url, priority in sources:
            # "source add" replaces an existing source of the same name
            self._add(
                HostWrite(
                    CATEGORY_PACKAGE_MANAGER,
                    f"choco:source:{name}",
                    f"set Chocolatey source {name} ({url}) priority {priority}",
                    command=(CHOCOLATEY_EXE, "source", "add", "--name", name, "--source", url, "--priority", str(priority)),
                )
            )
        self._add(
            HostWrite(
                CATEGORY_PACKAGE_MANAGER,
                "choco:config:cacheLocation",
                f"set Chocolatey cache directory to {cache_dir}",
                command=(CHOCOLATEY_EXE, "config", "set", "--name", "cacheLocation", "--value", cache_dir),
            )
        )
        return self

    def disable_power_timeouts(self) -> "HostConfigurationWriter":
        for setting in POWER_TIMEOUT_SETTINGS:
            for source in POWER_SOURCES:
                self._add(
                    HostWrite(
                        CATEGORY_POWER,
                        f"power:{setting}-{source}",
                        f"set {setting} ({source.upper()}) to never",
                        command=("powercfg", "/change", f"{setting}-{source}", "0"),
                    )
                )
        return self

    def export_environment(self, envs: Mapping[str, str]) -> "HostConfigurationWriter":
        """Machine-scope environment: the given (already expanded) bindings plus the profile marker."""
        for name, value in list(envs.items()) + [(PROFILE_KEY, PROFILE_NAME)]:
            self._add(
                HostWrite(
                    CATEGORY_ENVIRONMENT,
                    f"env:{name.upper()}",
                    f"set {name}={value} (machine)",
                    environment=(name, value),
                )
            )
        return self

    # inspection
    def writes(self) -> List[HostWrite]:
        return list(self._writes.values())

    def categories(self) -> List[str]:
        seen = []
        for write in self._writes.values():
            if write.category not in seen:
                seen.append(write.category)
        return seen

    def describe(self) -> List[str]:
        return [f"{w.category}: {w.description}{' (best effort)' if w.best_effort else ''}" for w in self._writes.values()]

    # application
    def apply(self) -> Tuple[InstallerResult, str]:
        """Apply every collected write, category by category, in collection order.

        A failed best-effort write is logged as a warning; any other failure
        stops application and returns FAILURE.
        """
        control_flow = self.platform.control_flow
        for line in self.describe():
            InstallerLogger.debug(f"Host write: {line}")

        if not control_flow.should_run_install_steps():
            for line in self.describe():
                InstallerLogger.info(f"Dry run/config-only: would {line}")
            return InstallerResult.SKIPPED, f"{len(self._writes)} host writes not applied"

        for category in self.categories():
            InstallerLogger.start(category)
            warnings = 0
            for write in (w for w in self._writes.values() if w.category == category):
                if write.apply(self.platform):
                    continue
                if write.best_effort:
                    warnings += 1
                    InstallerLogger.warning(f"Unable to {write.description}")
                else:
                    InstallerLogger.end(category, InstallerResult.FAILURE, f"unable to {write.description}")
                    return InstallerResult.FAILURE, f"{category}: unable to {write.description}"
            InstallerLogger.end(
                category,
                InstallerResult.SUCCESS,
                f"{warnings} best-effort change(s) not applied" if warnings else None,
            )

        return InstallerResult.SUCCESS, f"{len(self._writes)} host writes applied"
