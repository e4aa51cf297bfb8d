#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Base View
==========

Base class for all views in the VM installer GUI.
"""

from typing import Any

import customtkinter

# Padding and spacing
PADDING_LARGE = 20
PADDING_MEDIUM = 10
PADDING_SMALL = 5

# Colors
COLOR_ERROR = "#e74c3c"


class BaseView:
    """Base class for all views in the VM installer GUI"""

    def __init__(self, parent, controller):
        """
        Initialize with parent frame and controller

        Args:
            parent: The parent tkinter widget
            controller: The controller for this view
        """
        self.parent = parent
        self.controller = controller
        self.frame = None
        self.error_label = None

        # Component registry for easy access and management
        self.components = {}

        self.create_ui()

    def create_ui(self):
        """
        Create the main UI frame for the view.
        Each view should override this method to set up their specific UI.
        """
        self.frame = customtkinter.CTkFrame(self.parent)
        self.frame.pack(fill="both", expand=True, padx=PADDING_MEDIUM, pady=PADDING_MEDIUM)
        return self.frame

    def register_component(self, name: str, component: Any) -> Any:
        self.components[name] = component
        return component

    def get_component(self, name: str) -> Any:
        return self.components.get(name, None)

    def show_error(self, message: str):
        if self.error_label is not None:
            self.error_label.configure(text=message, text_color=COLOR_ERROR)

    def clear_error(self):
        if self.error_label is not None:
            self.error_label.configure(text="")
