#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Configuration source and installation behavior arguments for the VM installer
"""

import os


def add_environment_args(parser):
    """
    Add configuration source, credential and step-skipping arguments to the parser

    Args:
        parser: ArgumentParser to add arguments to
    """
    source_group = parser.add_argument_group(title="Configuration Sources")
    source_group.add_argument(
        "--config-source",
        "--customConfig",
        required=False,
        dest="configSource",
        metavar="<path|url>",
        type=str,
        default=None,
        help="Local path or URL of the configuration document (default: the published config.xml)",
    )
    source_group.add_argument(
        "--layout-source",
        "--customLayout",
        required=False,
        dest="layoutSource",
        metavar="<path|url>",
        type=str,
        default=None,
        help="Local path or URL of a start menu layout file copied alongside the configuration",
    )
    source_group.add_argument(
        "--working-dir",
        required=False,
        dest="workingDir",
        metavar="<path>",
        type=str,
        default=os.getenv("VM_INSTALLER_DIR", None),
        help="Directory holding the working copy of the configuration and the package index cache (default: current directory)",
    )
    source_group.add_argument(
        "--policy-file",
        required=False,
        dest="policyFile",
        metavar="<path>",
        type=str,
        default=os.getenv("VM_INSTALLER_POLICY", None),
        help="YAML file overriding preflight thresholds and installer lists",
    )
    source_group.add_argument(
        "--refresh-catalog",
        dest="refreshCatalog",
        action="store_true",
        default=False,
        help="Ignore the cached package index and query the feed again",
    )

    credential_group = parser.add_argument_group(title="Credentials")
    credential_mutex = credential_group.add_mutually_exclusive_group()
    credential_mutex.add_argument(
        "--password",
        required=False,
        dest="password",
        metavar="<string>",
        type=str,
        default=None,
        help="Password of the current account, used to log back in after reboots",
    )
    credential_mutex.add_argument(
        "--no-password",
        "--noPassword",
        dest="noPassword",
        action="store_true",
        default=False,
        help="Do not ask for a password; automatic log in after reboots is disabled",
    )

    behavior_group = parser.add_argument_group(title="Installation Behavior")
    behavior_group.add_argument(
        "--skip-wait",
        "--noWait",
        dest="skipWait",
        action="store_true",
        default=False,
        help="Start installing without the countdown",
    )
    behavior_group.add_argument(
        "--skip-customization",
        "--noGui",
        dest="skipCustomization",
        action="store_true",
        default=False,
        help="Install the configuration document's packages without customizing them",
    )
    behavior_group.add_argument(
        "--no-reboots",
        "--noReboots",
        dest="noReboots",
        action="store_true",
        default=False,
        help="Do not allow the installation engine to reboot the machine",
    )
    behavior_group.add_argument(
        "--skip-validation",
        "--noChecks",
        dest="skipValidation",
        action="store_true",
        default=False,
        help="Bypass every preflight check",
    )
