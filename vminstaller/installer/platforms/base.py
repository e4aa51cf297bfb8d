#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Base installer class for platform-specific installers."""

import abc
import os
import subprocess
import time
from typing import List, Optional, Tuple, TYPE_CHECKING

from vminstaller.vm_utils import flatten, get_iterable
from vminstaller.installer.configs.constants.constants import POWERSHELL_BASE_ARGS, POWERSHELL_EXE
from vminstaller.installer.configs.constants.enums import ControlFlow, EnvScope
from vminstaller.installer.core.policy import InstallerSettings
from vminstaller.installer.utils.logger_utils import InstallerLogger

if TYPE_CHECKING:
    from vminstaller.installer.core.config_document import ConfigDocument
    from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan
    from vminstaller.installer.core.validation import HostFacts


class BaseInstaller(abc.ABC):
    """Abstract base class for platform-specific installers."""

    def __init__(
        self,
        ui,
        debug: bool = False,
        control_flow: ControlFlow | None = None,
        settings: Optional[InstallerSettings] = None,
    ):
        """Initialize the base installer.

        Args:
            ui: User interface implementation for user interactions
            debug: Enable debug output
            control_flow: DRYRUN logs intended actions, CONFIG writes documents only
            settings: thresholds, engine minimums and package sources
        """
        self.ui = ui
        self.debug = debug
        self.control_flow: ControlFlow = control_flow or ControlFlow.INSTALL
        self.settings = settings or InstallerSettings()

    def is_dry_run(self) -> bool:
        return self.control_flow.is_dry_run()

    def is_config_only(self) -> bool:
        return self.control_flow.is_config_only()

    def should_write_files(self) -> bool:
        return self.control_flow.should_write_files()

    def should_run_install_steps(self) -> bool:
        return self.control_flow.should_run_install_steps()

    @abc.abstractmethod
    def install(self, doc: "ConfigDocument", plan: "InstallPlan", paths: "InstallPaths") -> bool:
        """Execute the full installation flow for this platform.

        Must honor ControlFlow: dry-run makes no changes; config-only writes
        documents but skips host changes; install runs all steps.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def host_facts(self) -> "HostFacts":
        """Read-only host facts used by the preflight checks."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_environment_variable(self, name: str, value: str, scope: EnvScope = EnvScope.MACHINE) -> bool:
        """Persist an environment variable at the given scope and mirror it into this process."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_registry_value(self, key: str, value_name: str, value) -> bool:
        """Write a DWORD/string value under HKEY_LOCAL_MACHINE."""
        raise NotImplementedError

    def run_installation(self, doc: "ConfigDocument", plan: "InstallPlan", paths: "InstallPaths") -> bool:
        """Run the installation process for this platform via install()."""
        try:
            return self.install(doc, plan, paths)
        except Exception as e:
            InstallerLogger.error(f"Installation failed: {e}")
            return False

    def run_process(
        self,
        command: List[str],
        stdin: Optional[str] = None,
        retry: int = 0,
        retry_sleep_sec: int = 5,
        stderr: bool = True,
        env: Optional[dict] = None,
    ) -> Tuple[int, List[str]]:
        """Run a system process and return (exit code, output lines).

        stdin is never logged.
        """
        retcode = -1
        output = []
        flat_command = list(flatten(get_iterable(command)))

        for i in range(retry + 1):
            output = []
            try:
                process = subprocess.run(
                    flat_command,
                    input=stdin if stdin else None,
                    capture_output=True,
                    check=False,
                    text=True,
                    errors="ignore",
                    env=env,
                )
                retcode = process.returncode
                if process.stdout:
                    output.extend(process.stdout.splitlines())
                if stderr and process.stderr:
                    output.extend(process.stderr.splitlines())
                if retcode == 0:
                    break
            except FileNotFoundError:
                output = [f"Command {' '.join(flat_command)} not found or unable to execute"]
                retcode = 127
                break
            except OSError as e:
                output = [f"Error executing command {' '.join(flat_command)}: {e}"]
                retcode = 1

            if i < retry:
                InstallerLogger.warning(
                    f"Command failed (attempt {i+1}/{retry+1}). Retrying in {retry_sleep_sec} seconds..."
                )
                time.sleep(retry_sleep_sec)

        if self.debug:
            InstallerLogger.debug(f"Command {' '.join(flat_command)} returned {retcode}: {output}")

        return retcode, output

    def run_powershell(
        self,
        script: str,
        stdin: Optional[str] = None,
        bypass_policy: bool = True,
        retry: int = 0,
    ) -> Tuple[int, List[str]]:
        """Run a PowerShell snippet. With bypass_policy=False the host's own execution policy applies."""
        args = list(POWERSHELL_BASE_ARGS)
        if not bypass_policy:
            idx = args.index("-ExecutionPolicy")
            del args[idx : idx + 2]
        return self.run_process([POWERSHELL_EXE] + args + [script], stdin=stdin, retry=retry, env=dict(os.environ))
