#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""Build and format installation summaries for UI display."""

from typing import List, Optional, Tuple

from vminstaller.vm_constants import TRACKED_ENV_KEYS
from vminstaller.installer.configs.constants.enums import ControlFlow
from vminstaller.installer.core.config_document import ConfigDocument
from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan
from vminstaller.installer.platforms.utils.install_engine import engine_log_locations

SUMMARY_PACKAGE_PREVIEW = 12


def build_install_summary_items(
    doc: ConfigDocument,
    plan: InstallPlan,
    paths: InstallPaths,
    control_flow: Optional[ControlFlow] = None,
) -> List[Tuple[str, str]]:
    """Build a list of (label, value) tuples describing what is about to happen."""
    names = sorted(doc.package_names(), key=str.lower)
    preview = ", ".join(names[:SUMMARY_PACKAGE_PREVIEW])
    if len(names) > SUMMARY_PACKAGE_PREVIEW:
        preview += f", ... (+{len(names) - SUMMARY_PACKAGE_PREVIEW} more)"

    items = [
        ("Packages", f"{len(names)}"),
        ("Package List", preview),
    ]
    for key in TRACKED_ENV_KEYS:
        items.append((key, doc.envs.get(key, "")))
    items.extend(
        [
            ("Bootstrap Package", plan.package_name),
            ("Automatic Reboots", plan.allow_reboot),
            ("Auto-logon Credential", plan.credential is not None),
            ("Configuration File", paths.config_path),
            ("Layout File", paths.layout_path or ""),
        ]
    )
    if control_flow is not None:
        items.append(("Dry Run", control_flow.is_dry_run()))
        items.append(("Configuration Only", control_flow.is_config_only()))
    return items


def build_completion_message(doc: ConfigDocument, handed_off: bool) -> str:
    """Where to look once the engine takes over (it reports its own package failures)."""
    lines = []
    if handed_off:
        lines.append("Installation has been handed off to Boxstarter.")
        lines.append("The machine may reboot several times; installation resumes automatically after logon.")
    else:
        lines.append("Configuration complete; no installation was started.")
    lines.append("")
    lines.append("Installation logs:")
    for location in engine_log_locations(doc.envs):
        lines.append(f"  {location}")
    return "\n".join(lines)
