#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Base Controller for the VM installer GUI
========================================

This module provides the base class for all controllers in the GUI installer.
Controllers hold no toolkit references so they can be driven from tests.
"""


class BaseController:
    """
    Base class for all Controllers in MVC architecture.

    This class serves as the base for all Controller classes, providing
    common functionality for managing the Model and View.
    """

    def __init__(self, model):
        """
        Initialize with a reference to the model.

        Args:
            model: The model instance (e.g. a CustomizationSession)
        """
        self.model = model
        self.view = None

    def set_view(self, view):
        """
        Set the view this controller will manage.

        Args:
            view: The view instance to manage
        """
        self.view = view
        self.refresh_view()

    def refresh_view(self):
        """
        Refresh the view with current model data.

        This method should be overridden by subclasses to update
        specific view elements with data from the model.
        """
        pass

    def validate(self):
        """
        Validate all settings managed by this controller.

        Returns:
            tuple: (success, error_message)
        """
        return True, ""
