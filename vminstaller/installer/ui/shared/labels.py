#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Display labels shared across TUI, DUI and GUI customization surfaces."""

from vminstaller.vm_constants import ENV_KEY_COMMON_DIR, ENV_KEY_RAW_TOOLS_DIR, ENV_KEY_TOOL_LIST_DIR

ENV_LABELS = {
    ENV_KEY_COMMON_DIR: "Shared installer files",
    ENV_KEY_TOOL_LIST_DIR: "Tools start menu folder",
    ENV_KEY_RAW_TOOLS_DIR: "Raw tools directory",
}


def env_display_label(key: str) -> str:
    return f"{ENV_LABELS.get(key, key)} ({key})"
