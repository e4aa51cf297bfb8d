#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from enum import Enum, auto


###################################################################################################
VMINSTALLER_VERSION = "1.4.0"

###################################################################################################
# machine-scope marker identifying this provisioning profile
PROFILE_KEY = "VMname"
PROFILE_NAME = "ANALYSIS-VM"

###################################################################################################
PLATFORM_WINDOWS = "Windows"

###################################################################################################
# environment variables tracked by the customization session and exported machine-wide
ENV_KEY_COMMON_DIR = "COMMON_DIR"
ENV_KEY_TOOL_LIST_DIR = "TOOL_LIST_DIR"
ENV_KEY_RAW_TOOLS_DIR = "RAW_TOOLS_DIR"
TRACKED_ENV_KEYS = (ENV_KEY_COMMON_DIR, ENV_KEY_TOOL_LIST_DIR, ENV_KEY_RAW_TOOLS_DIR)

ENV_DEFAULTS = {
    ENV_KEY_COMMON_DIR: r"%ProgramData%\_VM",
    ENV_KEY_TOOL_LIST_DIR: r"%ProgramData%\Microsoft\Windows\Start Menu\Programs\Tools",
    ENV_KEY_RAW_TOOLS_DIR: r"%SystemDrive%\Tools",
}

###################################################################################################
# configuration document and layout file names
CONFIG_FILE_NAME = "config.xml"
LAYOUT_FILE_NAME = "LayoutModification.xml"
PACKAGE_INDEX_CACHE_FILE_NAME = "available_packages.json"

DEFAULT_CONFIG_URL = "https://raw.githubusercontent.com/analysis-vm/vm-installer/main/config.xml"

###################################################################################################
# package feed and package identifiers
PACKAGE_FEED_URL = "https://www.myget.org/F/vm-packages/api/v2"
COMMUNITY_FEED_URL = "https://community.chocolatey.org/api/v2"
BOOTSTRAP_PACKAGE = "installer.vm"
SHARED_STATE_PACKAGE = "common.vm"
EXCLUDED_PACKAGES = ("installer.vm", "common.vm", "debloat.vm")

###################################################################################################
# installation engine minimum versions
BOXSTARTER_MIN_VERSION = "3.0.2"
CHOCOLATEY_MIN_VERSION = "2.0.0"


###################################################################################################
# Constants for run modes
class PresentationMode(Enum):
    MODE_TUI = auto()  # Text-based User Interface
    MODE_DUI = auto()  # Dialogs
    MODE_GUI = auto()  # Graphical
    MODE_SILENT = auto()  # Silent mode
