#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Logging and error helpers shared by every installer component."""

from .logger_utils import InstallerLogger

from .exceptions import (
    ConfigDocumentError,
    ConfigurationMissingError,
    EngineError,
    FetchError,
    InstallerError,
    PolicyFileError,
    SessionClosedError,
)

__all__ = [
    "InstallerLogger",
    "InstallerError",
    "ConfigDocumentError",
    "ConfigurationMissingError",
    "EngineError",
    "FetchError",
    "PolicyFileError",
    "SessionClosedError",
]
