#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


from enum import Enum, auto


# Used primarily for getting status from discrete steps during the installer and subsequently logging
class InstallerResult(Enum):
    """Return status for an installation step."""

    SUCCESS = auto()
    FAILURE = auto()
    SKIPPED = auto()


# top-level control flow for the installer
class ControlFlow(Enum):
    """High-level control over what the installer should do.

    - DRYRUN: log intended actions; make no changes (no file writes, no host changes)
    - INSTALL: write configuration, configure the host and hand off to the installation engine
    - CONFIG: write configuration documents only; no host changes and no hand-off
    """

    DRYRUN = auto()
    INSTALL = auto()
    CONFIG = auto()

    # query helpers
    def is_dry_run(self) -> bool:
        return self is ControlFlow.DRYRUN

    def is_config_only(self) -> bool:
        return self is ControlFlow.CONFIG

    def should_write_files(self) -> bool:
        """returns True only when file writes are allowed"""
        return self is not ControlFlow.DRYRUN

    def should_run_install_steps(self) -> bool:
        """returns True only when installation (system-changing) steps should run"""
        return self is ControlFlow.INSTALL

    # logging helpers
    def would(self, action: str) -> str:
        """formats an action string appropriately for the current mode"""
        return ("Dry run: would " + action) if self is ControlFlow.DRYRUN else action


# outcome of a single preflight check
class CheckOutcome(Enum):
    PASS = "pass"
    WARN_CONFIRM = "warn_confirm"
    FAIL = "fail"


# scope for a persisted environment variable
class EnvScope(Enum):
    MACHINE = "Machine"
    USER = "User"
    PROCESS = "Process"
