#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Tunable thresholds and lists, with optional overrides from a YAML policy file.

Example policy file:

    preflight:
      min_free_disk_gib: 80
      tested_os_builds: ["19045", "22631"]
    installer:
      excluded_packages: ["installer.vm", "common.vm", "debloat.vm", "flaky.vm"]
      start_countdown_sec: 0
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from vminstaller.vm_constants import (
    BOOTSTRAP_PACKAGE,
    BOXSTARTER_MIN_VERSION,
    CHOCOLATEY_MIN_VERSION,
    EXCLUDED_PACKAGES,
    SHARED_STATE_PACKAGE,
)
from vminstaller.installer.configs.constants.constants import (
    ALLOWED_EXECUTION_POLICIES,
    HYPERVISOR_IDENTIFIERS,
    MIN_FREE_DISK_GIB,
    MIN_OS_MAJOR_VERSION,
    MIN_POWERSHELL_VERSION,
    NETWORK_PROBE_TIMEOUT_SEC,
    PACKAGE_SOURCES,
    REQUIRED_ENDPOINTS,
    START_COUNTDOWN_SEC,
    TESTED_OS_BUILDS,
)
from vminstaller.installer.utils.exceptions import PolicyFileError
from vminstaller.installer.utils.logger_utils import InstallerLogger


@dataclass(frozen=True)
class PreflightPolicy:
    min_powershell_version: str = MIN_POWERSHELL_VERSION
    min_os_major_version: int = MIN_OS_MAJOR_VERSION
    tested_os_builds: Tuple[str, ...] = TESTED_OS_BUILDS
    hypervisor_identifiers: Tuple[str, ...] = HYPERVISOR_IDENTIFIERS
    min_free_disk_gib: int = MIN_FREE_DISK_GIB
    allowed_execution_policies: Tuple[str, ...] = ALLOWED_EXECUTION_POLICIES
    required_endpoints: Tuple[str, ...] = REQUIRED_ENDPOINTS
    network_timeout_sec: int = NETWORK_PROBE_TIMEOUT_SEC


@dataclass(frozen=True)
class InstallerSettings:
    preflight: PreflightPolicy = field(default_factory=PreflightPolicy)
    boxstarter_min_version: str = BOXSTARTER_MIN_VERSION
    chocolatey_min_version: str = CHOCOLATEY_MIN_VERSION
    bootstrap_package: str = BOOTSTRAP_PACKAGE
    shared_state_package: str = SHARED_STATE_PACKAGE
    excluded_packages: Tuple[str, ...] = EXCLUDED_PACKAGES
    # (name, url, priority)
    package_sources: Tuple[Tuple[str, str, int], ...] = PACKAGE_SOURCES
    start_countdown_sec: int = START_COUNTDOWN_SEC


def _coerce(name: str, current: Any, value: Any, source: str) -> Any:
    """Coerce a YAML value to the type of the field's current value."""
    try:
        if isinstance(current, tuple):
            if not isinstance(value, (list, tuple)):
                raise TypeError("expected a list")
            if current and isinstance(current[0], tuple):
                return tuple((str(v[0]), str(v[1]), int(v[2])) for v in value)
            return tuple(str(v) for v in value)
        if isinstance(current, bool):
            return bool(value)
        if isinstance(current, int):
            return int(value)
        return str(value)
    except (TypeError, ValueError, IndexError) as e:
        raise PolicyFileError(f"{source}: invalid value for '{name}': {e}")


def _apply_section(obj, section: Optional[Dict[str, Any]], section_name: str, source: str):
    if not section:
        return obj
    if not isinstance(section, dict):
        raise PolicyFileError(f"{source}: '{section_name}' must be a mapping")
    known = {f.name for f in fields(obj) if f.name != "preflight"}
    changes = {}
    for key, value in section.items():
        if key not in known:
            raise PolicyFileError(f"{source}: unknown setting '{section_name}.{key}'")
        changes[key] = _coerce(key, getattr(obj, key), value, source)
        InstallerLogger.debug(f"Policy override {section_name}.{key} = {changes[key]}")
    return replace(obj, **changes)


def load_settings(policy_file: Optional[str] = None) -> InstallerSettings:
    """Return built-in settings, overridden by *policy_file* when one is given."""
    settings = InstallerSettings()
    if not policy_file:
        return settings

    path = Path(policy_file)
    if not path.is_file():
        raise PolicyFileError(f"Policy file not found: {policy_file}")
    try:
        yaml = YAML(typ="safe", pure=True)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except (OSError, YAMLError) as e:
        raise PolicyFileError(f"Failed to read policy file {policy_file}: {e}")

    if not isinstance(data, dict):
        raise PolicyFileError(f"{policy_file}: policy file must contain a mapping at root level")
    unknown = set(data) - {"preflight", "installer"}
    if unknown:
        raise PolicyFileError(f"{policy_file}: unknown section(s) {', '.join(sorted(unknown))}")

    preflight = _apply_section(settings.preflight, data.get("preflight"), "preflight", policy_file)
    settings = _apply_section(settings, data.get("installer"), "installer", policy_file)
    return replace(settings, preflight=preflight)
