#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Core components for the VM installer.

This module contains the configuration document and its store, the catalog
resolver, the customization session and the preflight validator.
"""

from .config_document import ConfigDocument, PackageRef, apply_customization, expand_env_value
from .config_store import fetch_to_path, load_document, persist_document
from .catalog import CatalogItem, CatalogResolution, PackageIndexCache, resolve
from .customization import CustomizationResult, CustomizationSession, tracked_env_defaults
from .install_plan import Credential, InstallPaths, InstallPlan
from .policy import InstallerSettings, PreflightPolicy, load_settings
from .validation import CheckResult, HostFacts, NetworkProbe, run_preflight, validate

__all__ = [
    "ConfigDocument",
    "PackageRef",
    "apply_customization",
    "expand_env_value",
    "fetch_to_path",
    "load_document",
    "persist_document",
    "CatalogItem",
    "CatalogResolution",
    "PackageIndexCache",
    "resolve",
    "CustomizationResult",
    "CustomizationSession",
    "tracked_env_defaults",
    "Credential",
    "InstallPaths",
    "InstallPlan",
    "InstallerSettings",
    "PreflightPolicy",
    "load_settings",
    "CheckResult",
    "HostFacts",
    "NetworkProbe",
    "run_preflight",
    "validate",
]
