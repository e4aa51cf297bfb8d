#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Base menu class for TUI installer interface."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from vminstaller.vm_common import (
    InstallerAskForString,
    InstallerYesOrNo,
    UserInterfaceMode,
    DialogBackException,
    DialogCanceledException,
)
from vminstaller.vm_utils import clear_screen
from ..shared.menu_builder import MenuBuilder


class BaseMenu(ABC):
    """Base class for TUI menus that use InstallerAsk* functions for input."""

    def __init__(self, ui_mode: UserInterfaceMode = UserInterfaceMode.InteractionInput):
        """Initialize the base menu.

        Args:
            ui_mode: The user interface mode for InstallerAsk* functions
        """
        self.ui_mode = ui_mode
        self.menu_builder = MenuBuilder()

    def ask_string(self, prompt: str, default: str = "") -> Optional[str]:
        return InstallerAskForString(prompt, default=default, uiMode=self.ui_mode)

    def ask_yes_no(self, message: str, default: bool = True) -> bool:
        return InstallerYesOrNo(message, default=default, uiMode=self.ui_mode)

    def run_menu(self) -> Any:
        """Run the menu loop and return the result.

        Returns:
            The menu result (varies by implementation)
        """
        try:
            while True:
                clear_screen()
                self.menu_builder.clear()

                self.build_menu()
                self.menu_builder.display()

                choice = self.get_user_choice()

                # None keeps the loop going
                result = self.process_choice(choice)
                if result is not None:
                    return result

        except KeyboardInterrupt:
            return self.handle_cancel()
        except (DialogBackException, DialogCanceledException):
            return self.handle_cancel()

    @abstractmethod
    def build_menu(self) -> None:
        """Populate self.menu_builder with the menu items, actions, and formatting."""
        pass

    @abstractmethod
    def process_choice(self, choice: str) -> Any:
        """Process the user's menu choice.

        Returns:
            The result of processing the choice, or None to continue the menu loop
        """
        pass

    def get_user_choice(self) -> str:
        choice = self.ask_string("Enter item number or action", default="")
        return choice.strip() if choice else ""

    def handle_cancel(self) -> Any:
        """Handle menu cancellation.

        Returns:
            The result to return when the menu is cancelled
        """
        return None

    def handle_invalid_choice(self, choice: str) -> None:
        print(f"Invalid input: {choice}")
        self.ask_string("Press Enter to continue...", default="")

    def parse_numeric_choice(self, choice: str, max_items: int) -> Optional[int]:
        """Parse a numeric choice and validate it.

        Returns:
            The parsed item index (0-based), or None if invalid
        """
        try:
            item_index = int(choice) - 1
            if 0 <= item_index < max_items:
                return item_index
            else:
                print(f"Invalid item number: {choice}")
                self.ask_string("Press Enter to continue...", default="")
                return None
        except ValueError:
            return None

    @staticmethod
    def parse_numeric_selection(text: str, max_items: int) -> List[int]:
        """Parse "1,3,5-7" into sorted 0-based indexes; out-of-range entries are dropped.

        Raises ValueError for anything that is not a number or a range.
        """
        indexes = set()
        for part in (p.strip() for p in text.split(",")):
            if not part:
                continue
            if "-" in part:
                start, _, end = part.partition("-")
                lo, hi = int(start), int(end)
                if lo > hi:
                    lo, hi = hi, lo
                indexes.update(range(lo - 1, hi))
            else:
                indexes.add(int(part) - 1)
        return sorted(i for i in indexes if 0 <= i < max_items)
