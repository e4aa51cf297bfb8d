#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Provisioning installer for Windows analysis virtual machines."""

from vminstaller.vm_constants import VMINSTALLER_VERSION

__version__ = VMINSTALLER_VERSION
