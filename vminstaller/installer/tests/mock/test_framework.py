#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Test framework infrastructure for the VM installer."""

import argparse
import shutil
import tempfile
import unittest
from typing import Any, Callable, Dict, List, Optional, Tuple

from vminstaller.vm_common import UserInterfaceMode
from vminstaller.installer.configs.constants.enums import ControlFlow, EnvScope
from vminstaller.installer.core.policy import InstallerSettings
from vminstaller.installer.core.validation import GIB, HostFacts, NetworkProbe
from vminstaller.installer.platforms.windows import WindowsInstaller
from vminstaller.installer.utils.logger_utils import InstallerLogger


class MockUI:
    """Mock UI implementation for testing.

    Yes/no responses are looked up by a substring of the prompt; anything
    unmatched returns the prompt's default.
    """

    def __init__(
        self,
        responses: Dict[str, Any] = None,
        negotiate_script: Optional[Callable] = None,
        confirm_summary: bool = True,
        secret: Optional[str] = None,
    ):
        self.ui_mode = UserInterfaceMode.InteractionInput
        self.responses = responses or {}
        self.negotiate_script = negotiate_script
        self.confirm_summary = confirm_summary
        self.secret = secret
        self.called_methods = []

    def _lookup(self, prompt: str, default):
        for key, value in self.responses.items():
            if key in prompt:
                return value
        return default

    def ask_yes_no(self, prompt: str, default: bool = True) -> bool:
        self.called_methods.append(("ask_yes_no", prompt, default))
        return self._lookup(prompt, default)

    def ask_string(self, prompt: str, default: str = "") -> str:
        self.called_methods.append(("ask_string", prompt, default))
        return self._lookup(prompt, default)

    def ask_password(self, prompt: str, default: str = "") -> Optional[str]:
        self.called_methods.append(("ask_password", prompt))
        return self.secret

    def ask_credential_secret(self, username: str) -> Optional[str]:
        self.called_methods.append(("ask_credential_secret", username))
        return self.secret

    def display_message(self, message: str):
        self.called_methods.append(("display_message", message))

    def display_error(self, message: str):
        self.called_methods.append(("display_error", message))

    def negotiate(self, session):
        """Run the scripted transitions; the script may cancel, otherwise the session is accepted."""
        self.called_methods.append(("negotiate",))
        if self.negotiate_script is not None:
            self.negotiate_script(session)
        return session.accept() if session.is_open else None

    def show_final_configuration_summary(self, doc, plan, paths, control_flow) -> bool:
        self.called_methods.append(("show_final_configuration_summary", plan))
        return self.confirm_summary

    def calls(self, name: str) -> List[tuple]:
        return [c for c in self.called_methods if c[0] == name]


class StaticHostFacts(HostFacts):
    """Host facts from fixed values; a value that is an Exception instance is raised instead."""

    DEFAULTS = {
        "powershell_version": "5.1.22621.2506",
        "is_elevated": True,
        "execution_policy": "Unrestricted",
        "username": "analyst",
        "os_version": "10.0.22631",
        "manufacturer_model": ("VMware, Inc.", "VMware Virtual Platform"),
        "free_disk_bytes": 100 * GIB,
        "tamper_protection_enabled": False,
        "realtime_protection_enabled": False,
    }

    def __init__(self, **overrides):
        self.values = dict(self.DEFAULTS)
        self.values.update(overrides)
        self.queried = []

    def _get(self, name):
        self.queried.append(name)
        value = self.values[name]
        if isinstance(value, Exception):
            raise value
        return value

    def powershell_version(self):
        return self._get("powershell_version")

    def is_elevated(self):
        return self._get("is_elevated")

    def execution_policy(self):
        return self._get("execution_policy")

    def username(self):
        return self._get("username")

    def os_version(self):
        return self._get("os_version")

    def manufacturer_model(self):
        return self._get("manufacturer_model")

    def free_disk_bytes(self):
        return self._get("free_disk_bytes")

    def tamper_protection_enabled(self):
        return self._get("tamper_protection_enabled")

    def realtime_protection_enabled(self):
        return self._get("realtime_protection_enabled")


class FakeNetworkProbe(NetworkProbe):
    """Network probe answering from fixed tables and recording every probe."""

    def __init__(self, unreachable=(), statuses: Optional[Dict[str, int]] = None):
        super().__init__(timeout=1)
        self.unreachable = set(unreachable)
        self.statuses = statuses or {}
        self.probes = []

    def tcp_reachable(self, host: str, port: int) -> bool:
        self.probes.append(("tcp", host, port))
        return host not in self.unreachable

    def https_status(self, url: str) -> int:
        self.probes.append(("https", url))
        return self.statuses.get(url, 200)


class MockPlatform(WindowsInstaller):
    """Windows installer with every process, registry and environment write captured."""

    def __init__(
        self,
        ui: MockUI = None,
        debug: bool = False,
        control_flow: ControlFlow = ControlFlow.INSTALL,
        settings: Optional[InstallerSettings] = None,
        facts: Optional[HostFacts] = None,
    ):
        super().__init__(ui or MockUI(), debug, control_flow=control_flow, settings=settings)
        self.facts = facts or StaticHostFacts()

        # engine state reported by the version probes
        self.boxstarter_version = "3.0.3"
        self.chocolatey_version = "2.2.2"
        self.installed_packages: List[str] = []
        self.index_packages: List[Tuple[str, str]] = []

        # Command execution tracking
        self.run_process_results: Dict[str, Tuple[int, List[str]]] = {}
        self.executed_commands: List[Dict[str, Any]] = []
        self.env_writes: List[Tuple[str, str, EnvScope]] = []
        self.registry_writes: List[Tuple[str, str, Any]] = []

    def host_facts(self):
        return self.facts

    def run_process(self, command, stdin=None, retry=0, retry_sleep_sec=5, stderr=True, env=None):
        cmd_str = " ".join(command) if isinstance(command, list) else command
        self.executed_commands.append({"command": cmd_str, "stdin": stdin, "retry": retry})

        if cmd_str in self.run_process_results:
            return self.run_process_results[cmd_str]
        for fragment, result in self.run_process_results.items():
            if fragment in cmd_str:
                return result

        # Default behavior based on command patterns
        if "Get-Module -ListAvailable" in cmd_str:
            return (0, [self.boxstarter_version]) if self.boxstarter_version else (0, [])
        elif cmd_str == "choco --version":
            return (0, [self.chocolatey_version]) if self.chocolatey_version else (1, ["not found"])
        elif cmd_str == "choco list -r":
            return 0, [f"{name}|1.0.0" for name in self.installed_packages]
        elif cmd_str.startswith("choco search -r"):
            return 0, [f"{name}|{version}" for name, version in self.index_packages]

        return (0, [])  # Default success

    def set_command_result(self, command: str, return_code: int, output: list):
        """Set the result for a command (exact match, or any command containing the fragment)."""
        self.run_process_results[command] = (return_code, output)

    def set_environment_variable(self, name: str, value: str, scope: EnvScope = EnvScope.MACHINE) -> bool:
        self.env_writes.append((name, value, scope))
        return True

    def set_registry_value(self, key: str, value_name: str, value) -> bool:
        self.registry_writes.append((key, value_name, value))
        return True

    def commands(self, fragment: str = "") -> List[str]:
        return [c["command"] for c in self.executed_commands if fragment in c["command"]]


def make_args(**overrides) -> argparse.Namespace:
    """Parsed-argument namespace with every installer flag at its default."""
    values = dict(
        debug=False,
        quiet=True,
        configOnly=False,
        dryRun=False,
        logToFile=None,
        tui=False,
        dui=False,
        gui=False,
        non_interactive=False,
        configSource=None,
        layoutSource=None,
        workingDir=None,
        policyFile=None,
        refreshCatalog=False,
        password=None,
        noPassword=False,
        skipWait=True,
        skipCustomization=False,
        noReboots=False,
        skipValidation=False,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class BaseInstallerTest(unittest.TestCase):
    """Base test class with common setup and utilities."""

    def setUp(self):
        InstallerLogger.set_console_output(False)
        self.temp_dir = tempfile.mkdtemp()
        self.mock_ui = MockUI()
        self.mock_platform = MockPlatform(ui=self.mock_ui, debug=True)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        InstallerLogger.set_buffered_console(False)
        InstallerLogger.set_console_output(True)
