#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Custom exceptions for the VM installer."""


class InstallerError(Exception):
    """Base class for installer errors."""

    pass


class ConfigDocumentError(InstallerError):
    """Raised when a configuration document cannot be parsed or is malformed."""

    def __init__(self, source: str, message: str):
        super().__init__(f"Invalid configuration document '{source}': {message}")
        self.source = source


class ConfigurationMissingError(InstallerError):
    """Raised when no configuration document could be obtained."""

    def __init__(self, path: str):
        super().__init__(f"Configuration document not available at '{path}'.")
        self.path = path


class FetchError(InstallerError):
    """Raised when a local or remote file cannot be retrieved."""

    def __init__(self, locator: str, message: str):
        super().__init__(f"Unable to retrieve '{locator}': {message}")
        self.locator = locator


class SessionClosedError(InstallerError):
    """Raised when a customization session is used after accept or cancel."""

    pass


class EngineError(InstallerError):
    """Raised for errors reported by the installation engine or package manager."""

    pass


class PolicyFileError(InstallerError):
    """Raised for errors loading a policy override file."""

    pass
