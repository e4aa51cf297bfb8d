#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Centralized constants for preflight checks, the installation engine and host configuration.

These defaults back PreflightPolicy and InstallerSettings; anything site-specific
can be overridden by a policy file (see installer.core.policy).
"""

from vminstaller.vm_constants import COMMUNITY_FEED_URL, PACKAGE_FEED_URL

# Preflight thresholds
MIN_POWERSHELL_VERSION = "5.1"
MIN_OS_MAJOR_VERSION = 10
MIN_FREE_DISK_GIB = 60
ALLOWED_EXECUTION_POLICIES = ("Unrestricted", "Bypass")

# Windows builds the package set is regularly exercised against
TESTED_OS_BUILDS = (
    "19045",  # Windows 10 22H2
    "22621",  # Windows 11 22H2
    "22631",  # Windows 11 23H2
    "26100",  # Windows 11 24H2
)

# substrings of Win32_ComputerSystem manufacturer/model that identify a hypervisor
HYPERVISOR_IDENTIFIERS = (
    "VMware",
    "VirtualBox",
    "innotek",
    "QEMU",
    "KVM",
    "Xen",
    "Parallels",
    "Virtual Machine",
    "Hyper-V",
    "Bochs",
    "Amazon EC2",
    "Google Compute Engine",
)

# endpoints that must be reachable over TCP and answer HTTPS GET with 200
REQUIRED_ENDPOINTS = (
    "https://github.com",
    "https://raw.githubusercontent.com",
    "https://www.myget.org",
)
NETWORK_PROBE_TIMEOUT_SEC = 10
HTTPS_DEFAULT_PORT = 443

# Installation engine
BOXSTARTER_BOOTSTRAP_URL = "https://boxstarter.org/bootstrapper.ps1"
BOXSTARTER_MODULE = "Boxstarter.Chocolatey"
CHOCOLATEY_EXE = "choco"
POWERSHELL_EXE = "powershell.exe"
POWERSHELL_BASE_ARGS = ("-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-Command")
ENGINE_BOOTSTRAP_ATTEMPTS = 1

# Package manager configuration
CHOCOLATEY_FEATURES = ("allowGlobalConfirmation", "allowEmptyChecksums")
# (name, url, priority); lower priority value wins
PACKAGE_SOURCES = (
    ("vm-packages", PACKAGE_FEED_URL, 1),
    ("chocolatey", COMMUNITY_FEED_URL, 2),
)
CHOCOLATEY_CACHE_DIR = r"%TEMP%\chocolatey"

# Power settings forced to 0 (never) on both AC and DC
POWER_TIMEOUT_SETTINGS = (
    "monitor-timeout",
    "disk-timeout",
    "standby-timeout",
    "hibernate-timeout",
)
POWER_SOURCES = ("ac", "dc")

# Update services disabled on a best-effort basis
WINDOWS_UPDATE_SERVICE = "wuauserv"
STORE_POLICY_KEY = r"SOFTWARE\Policies\Microsoft\WindowsStore"
STORE_AUTO_DOWNLOAD_VALUE = "AutoDownload"
STORE_AUTO_DOWNLOAD_DISABLED = 2

# machine-scope environment lives here
MACHINE_ENVIRONMENT_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"

# Defender facts
DEFENDER_FEATURES_KEY = r"SOFTWARE\Microsoft\Windows Defender\Features"
DEFENDER_TAMPER_VALUE = "TamperProtection"
# TamperProtection is 4 (or 0) when off and 5 when on
DEFENDER_TAMPER_ON_VALUES = (5,)

# Engine log locations surfaced in the completion message
BOXSTARTER_LOG = r"%LocalAppData%\Boxstarter\boxstarter.log"
CHOCOLATEY_LOG = r"%ProgramData%\chocolatey\logs\chocolatey.log"
COMMON_DIR_LOG_NAME = "log.txt"

# countdown before hand-off unless --skip-wait
START_COUNTDOWN_SEC = 10
