#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Menu building utilities for TUI installer interface."""

from enum import Enum
from typing import Any, List, Optional


class MenuBuilder:
    """Utility class for building consistent menu displays across TUI interfaces."""

    def __init__(self):
        """Initialize the menu builder."""
        self.menu_lines: List[str] = []

    def clear(self) -> None:
        """Clear the current menu content."""
        self.menu_lines.clear()

    def add_header(self, title: str, separator: str = "---") -> None:
        """Add a header section to the menu.

        Args:
            title: The header title
            separator: The separator characters to use
        """
        self.menu_lines.append(f"{separator} {title} {separator}")

    def add_description(self, description: str) -> None:
        self.menu_lines.append(description)

    def add_blank_line(self) -> None:
        self.menu_lines.append("")

    def add_item(self, number: int, label: str, current_value: Any, question: Optional[str] = None) -> None:
        """Add a menu item with current value display.

        Args:
            number: The item number
            label: The item label
            current_value: The current value to display
            question: Question text to display below the item
        """
        value_display = _format_scalar(current_value, empty_label="empty")
        self.menu_lines.append(f"  {number}. {label}: {value_display}")

        if question:
            self.menu_lines.append(f"     {question}")

    def add_columns(self, left_title: str, left: List[str], right_title: str, right: List[str], width: int = 38) -> None:
        """Add two side-by-side numbered lists (e.g. selected vs. available packages)."""
        self.menu_lines.append(f"  {left_title:<{width}}  {right_title}")
        self.menu_lines.append(f"  {'-' * len(left_title):<{width}}  {'-' * len(right_title)}")
        for i in range(max(len(left), len(right))):
            lhs = left[i] if i < len(left) else ""
            rhs = right[i] if i < len(right) else ""
            if len(lhs) > width:
                lhs = lhs[: width - 1] + "~"
            self.menu_lines.append(f"  {lhs:<{width}}  {rhs}")

    def add_action_section(self, title: str = "Actions") -> None:
        self.menu_lines.append("")
        self.menu_lines.append(f"--- {title} ---")

    def add_action(self, key: str, description: str) -> None:
        """Add an action item to the menu.

        Args:
            key: The action key/letter
            description: The action description
        """
        self.menu_lines.append(f"  {key}. {description}")

    def build(self) -> str:
        """Build the complete menu as a single string."""
        return "\n".join(self.menu_lines)

    def display(self) -> None:
        """Display the menu using print."""
        print(self.build())


class ValueFormatter:
    """Utility class for formatting values in menu displays."""

    @staticmethod
    def format_summary_value(label: str, value: Any) -> str:
        """Format a value for summary display."""
        if ("password" in label.lower() or "secret" in label.lower()) and value and not isinstance(value, bool):
            return "********"
        return _format_scalar(value, empty_label="Not Set")


def _format_scalar(value: Any, *, empty_label: str) -> str:
    """Format primitive, enum, and scalar values consistently.

    - bool -> Yes/No
    - Enum -> prettified enum name
    - None/empty -> empty_label
    - list/tuple/set -> comma separated
    """
    if value is None or value == "":
        return empty_label
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Enum):
        return value.name.replace("_", " ").strip().title()
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(str(v) for v in value) if value else empty_label
    return str(value)
