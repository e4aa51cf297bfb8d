#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Values handed to the installation driver; built fresh for every run and never persisted."""

import os
from dataclasses import dataclass, field
from typing import Optional

from vminstaller.vm_constants import CONFIG_FILE_NAME, LAYOUT_FILE_NAME, PACKAGE_INDEX_CACHE_FILE_NAME


@dataclass(frozen=True)
class Credential:
    username: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class InstallPlan:
    package_name: str
    credential: Optional[Credential] = None
    allow_reboot: bool = True
    allow_password: bool = True

    @classmethod
    def build(
        cls,
        package_name: str,
        username: str,
        secret: Optional[str],
        allow_reboot: bool = True,
        allow_password: bool = True,
    ) -> "InstallPlan":
        credential = Credential(username, secret) if allow_password and secret is not None else None
        return cls(
            package_name=package_name,
            credential=credential,
            allow_reboot=allow_reboot,
            allow_password=allow_password and credential is not None,
        )


@dataclass(frozen=True)
class InstallPaths:
    working_dir: str
    config_path: str
    index_cache_path: str
    layout_path: Optional[str] = None

    @classmethod
    def in_directory(cls, working_dir: str, with_layout: bool = False) -> "InstallPaths":
        return cls(
            working_dir=working_dir,
            config_path=os.path.join(working_dir, CONFIG_FILE_NAME),
            index_cache_path=os.path.join(working_dir, PACKAGE_INDEX_CACHE_FILE_NAME),
            layout_path=os.path.join(working_dir, LAYOUT_FILE_NAME) if with_layout else None,
        )
