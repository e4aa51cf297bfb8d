#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Preflight checks for the analysis VM installer.

Checks are read-only and return typed results; they never terminate the
process. run_preflight() is the control layer that turns results into
continue / confirm / abort decisions.

Goals:
- Keep rules centralized (single source of truth)
- Be presentation-agnostic (usable by TUI/DUI/GUI/Silent)
- Evaluate lazily so a fatal result stops any further probing
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING
from urllib.parse import urlparse

from vminstaller.vm_common import test_http_connection
from vminstaller.vm_utils import check_socket, contains_whitespace, powershell_quote, version_at_least, version_tuple
from vminstaller.installer.configs.constants.constants import HTTPS_DEFAULT_PORT
from vminstaller.installer.configs.constants.enums import CheckOutcome, InstallerResult
from vminstaller.installer.core.policy import PreflightPolicy
from vminstaller.installer.utils.logger_utils import InstallerLogger

if TYPE_CHECKING:
    from vminstaller.installer.platforms.base import BaseInstaller
    from vminstaller.installer.ui.shared.installer_ui import InstallerUI

GIB = 1024**3


@dataclass(frozen=True)
class CheckResult:
    name: str
    outcome: CheckOutcome
    message: str

    @property
    def passed(self) -> bool:
        return self.outcome is CheckOutcome.PASS


class HostFacts:
    """Read-only facts about the host, queried on demand.

    Each accessor may raise if the fact cannot be determined; the check that
    asked for it turns the exception into a result.
    """

    def powershell_version(self) -> Optional[str]:
        raise NotImplementedError

    def is_elevated(self) -> bool:
        raise NotImplementedError

    def execution_policy(self) -> Optional[str]:
        raise NotImplementedError

    def username(self) -> str:
        raise NotImplementedError

    def os_version(self) -> Optional[str]:
        raise NotImplementedError

    def manufacturer_model(self) -> Tuple[str, str]:
        raise NotImplementedError

    def free_disk_bytes(self) -> int:
        raise NotImplementedError

    def tamper_protection_enabled(self) -> bool:
        raise NotImplementedError

    def realtime_protection_enabled(self) -> bool:
        raise NotImplementedError


class NetworkProbe:
    """Reachability probes; replaced by a fake in tests."""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    def tcp_reachable(self, host: str, port: int) -> bool:
        return check_socket(host, port, timeout=self.timeout)

    def https_status(self, url: str) -> int:
        status, _reason = test_http_connection(url, timeout=self.timeout)
        return status


###################################################################################################
# individual checks: (facts, policy, probe) -> CheckResult


def _pass(name: str, message: str) -> CheckResult:
    return CheckResult(name, CheckOutcome.PASS, message)


def _warn(name: str, message: str) -> CheckResult:
    return CheckResult(name, CheckOutcome.WARN_CONFIRM, message)


def _fail(name: str, message: str) -> CheckResult:
    return CheckResult(name, CheckOutcome.FAIL, message)


def check_powershell_version(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "PowerShell version"
    version = facts.powershell_version()
    if version and version_at_least(version, policy.min_powershell_version):
        return _pass(name, f"PowerShell {version}")
    return _fail(name, f"PowerShell {version or 'unknown'} is older than {policy.min_powershell_version}")


def check_elevated(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Administrator"
    if facts.is_elevated():
        return _pass(name, "Running as administrator")
    return _fail(name, "The installer must be run from an elevated (administrator) session")


def check_execution_policy(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Execution policy"
    current = facts.execution_policy() or "unknown"
    allowed = {p.lower() for p in policy.allowed_execution_policies}
    if current.lower() in allowed:
        return _pass(name, f"Execution policy is {current}")
    return _fail(
        name,
        f"Execution policy is {current}; set it to one of {', '.join(policy.allowed_execution_policies)} "
        "(e.g. Set-ExecutionPolicy Unrestricted -Force)",
    )


def check_username(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Username"
    user = facts.username() or ""
    if not user:
        return _fail(name, "Unable to determine the current username")
    if contains_whitespace(user):
        return _fail(name, f"Username '{user}' contains whitespace, which breaks package installation paths")
    return _pass(name, f"Username {user}")


def check_os_version(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Windows version"
    version = facts.os_version()
    parts = version_tuple(version)
    if parts and parts[0] >= policy.min_os_major_version:
        return _pass(name, f"Windows {version}")
    return _warn(name, f"Windows {version or 'unknown'} is older than the supported major version {policy.min_os_major_version}")


def check_os_build(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Windows build"
    parts = version_tuple(facts.os_version())
    build = str(parts[2]) if len(parts) >= 3 else None
    if build and build in policy.tested_os_builds:
        return _pass(name, f"Build {build} is tested")
    return _warn(name, f"Windows build {build or 'unknown'} has not been tested with this installer")


def check_virtualization(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Virtual machine"
    manufacturer, model = facts.manufacturer_model()
    hardware = f"{manufacturer or ''} {model or ''}".strip()
    lowered = hardware.lower()
    if any(ident.lower() in lowered for ident in policy.hypervisor_identifiers):
        return _pass(name, f"Hypervisor detected ({hardware})")
    return _warn(
        name,
        f"No known hypervisor identified ({hardware or 'unknown hardware'}). "
        "Install only inside a virtual machine.",
    )


def check_disk_space(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Disk space"
    free = facts.free_disk_bytes()
    free_gib = free / GIB
    if free_gib >= policy.min_free_disk_gib:
        return _pass(name, f"{free_gib:.1f} GiB free")
    return _warn(name, f"Only {free_gib:.1f} GiB free; at least {policy.min_free_disk_gib} GiB is recommended")


def check_tamper_protection(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Tamper protection"
    if not facts.tamper_protection_enabled():
        return _pass(name, "Tamper protection is off")
    return _warn(
        name,
        "Windows Defender Tamper Protection is on. Packages may be quarantined or blocked "
        "unless it is turned off in Windows Security.",
    )


def check_realtime_protection(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Real-time protection"
    if not facts.realtime_protection_enabled():
        return _pass(name, "Real-time protection is off")
    return _warn(
        name,
        "Windows Defender real-time protection is on. Packages may be quarantined or blocked "
        "unless it is turned off (or Defender disabled through Group Policy).",
    )


def check_network(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    name = "Network"
    failures = []
    for url in policy.required_endpoints:
        parsed = urlparse(url)
        host = parsed.hostname or url
        port = parsed.port or HTTPS_DEFAULT_PORT
        if not probe.tcp_reachable(host, port):
            failures.append(f"{host}:{port} is unreachable")
            continue
        status = probe.https_status(url)
        if status != 200:
            failures.append(f"{url} returned HTTP {status}")
    if failures:
        return _fail(name, "Required endpoints are not available: " + "; ".join(failures))
    return _pass(name, f"{len(policy.required_endpoints)} required endpoints reachable")


def check_snapshot(facts: HostFacts, policy: PreflightPolicy, probe: NetworkProbe) -> CheckResult:
    # operator acknowledgment, not a host fact: always needs confirmation
    return _warn(
        "Snapshot",
        "Installation makes significant changes to this machine. "
        "Take a VM snapshot (or restore point) before continuing.",
    )


Check = Callable[[HostFacts, PreflightPolicy, NetworkProbe], CheckResult]

# (check, is_hard) in reporting order; username precedes network so it aborts before any probe
PREFLIGHT_CHECKS: Tuple[Tuple[Check, bool], ...] = (
    (check_powershell_version, True),
    (check_elevated, True),
    (check_execution_policy, True),
    (check_username, True),
    (check_os_version, False),
    (check_os_build, False),
    (check_virtualization, False),
    (check_disk_space, False),
    (check_tamper_protection, False),
    (check_realtime_protection, False),
    (check_network, True),
    (check_snapshot, True),
)


def validate(
    facts: HostFacts,
    policy: Optional[PreflightPolicy] = None,
    probe: Optional[NetworkProbe] = None,
    checks: Iterable[Tuple[Check, bool]] = PREFLIGHT_CHECKS,
) -> Iterator[CheckResult]:
    """Lazily evaluate each check, yielding one CheckResult per check.

    An exception raised while determining a fact becomes FAIL for a hard check
    and WARN_CONFIRM for a soft one.
    """
    policy = policy or PreflightPolicy()
    probe = probe or NetworkProbe(timeout=policy.network_timeout_sec)
    for check, is_hard in checks:
        try:
            yield check(facts, policy, probe)
        except Exception as e:
            label = check.__name__.replace("check_", "").replace("_", " ")
            message = f"Unable to check {label}: {e}"
            InstallerLogger.debug(message)
            yield _fail(label, message) if is_hard else _warn(label, message)


def run_preflight(
    results: Iterable[CheckResult],
    ui: Optional["InstallerUI"],
    non_interactive: bool = False,
) -> bool:
    """Consume check results in order and decide whether installation may proceed.

    FAIL aborts immediately (remaining checks are never evaluated). WARN_CONFIRM
    asks the operator; declining, or having no operator to ask, aborts.
    """
    evaluated: List[CheckResult] = []
    InstallerLogger.start("Preflight checks")
    for result in results:
        evaluated.append(result)
        if result.outcome is CheckOutcome.PASS:
            InstallerLogger.info(f"{result.name}: {result.message}")

        elif result.outcome is CheckOutcome.FAIL:
            InstallerLogger.error(f"{result.name}: {result.message}")
            InstallerLogger.end("Preflight checks", InstallerResult.FAILURE, result.name)
            return False

        else:
            InstallerLogger.warning(f"{result.name}: {result.message}")
            if non_interactive or ui is None:
                InstallerLogger.error(f"{result.name}: confirmation required but running non-interactively")
                InstallerLogger.end("Preflight checks", InstallerResult.FAILURE, result.name)
                return False
            if not ui.ask_yes_no(f"{result.message}\n\nContinue?", default=False):
                InstallerLogger.end("Preflight checks", InstallerResult.FAILURE, f"{result.name} declined")
                return False

    InstallerLogger.end("Preflight checks", InstallerResult.SUCCESS, f"{len(evaluated)} checks")
    return True


def apply_post_validation_actions(installer: "BaseInstaller", username: str) -> InstallerResult:
    """Set the operator account's password to never expire (idempotent)."""
    label = "Password expiry"
    InstallerLogger.start(label)
    control_flow = installer.control_flow
    if not control_flow.should_run_install_steps():
        InstallerLogger.info(f"Dry run/config-only: would set password for {username} to never expire")
        InstallerLogger.end(label, InstallerResult.SKIPPED)
        return InstallerResult.SKIPPED

    err, out = installer.run_powershell(f"Set-LocalUser -Name {powershell_quote(username)} -PasswordNeverExpires $true")
    if err != 0:
        InstallerLogger.end(label, InstallerResult.FAILURE, " ".join(out) or f"exit code {err}")
        return InstallerResult.FAILURE
    InstallerLogger.end(label, InstallerResult.SUCCESS, f"password for {username} never expires")
    return InstallerResult.SUCCESS
