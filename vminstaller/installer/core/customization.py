#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Customization session: the selected/available partition and the tracked directory bindings.

Every interaction surface (terminal menu, dialog, window) drives the same
session object; the surfaces only translate operator events into the
transitions below.
"""

import ntpath
from dataclasses import dataclass, field
from enum import Enum
from itertools import chain
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from vminstaller.vm_constants import ENV_DEFAULTS, TRACKED_ENV_KEYS
from vminstaller.installer.core.catalog import CatalogItem, CatalogResolution
from vminstaller.installer.core.config_document import ConfigDocument
from vminstaller.installer.utils.exceptions import SessionClosedError


class SessionState(Enum):
    OPEN = "open"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CustomizationResult:
    selected: FrozenSet[str]
    envs: Dict[str, str] = field(default_factory=dict)


def tracked_env_defaults(doc: ConfigDocument) -> Dict[str, str]:
    """Values of the tracked env keys from the document, falling back to the built-in defaults."""
    return {key: doc.envs.get(key, ENV_DEFAULTS[key]) for key in TRACKED_ENV_KEYS}


class CustomizationSession:
    """Two disjoint sets, selected and available, over a fixed universe of catalog items.

    No transition adds or loses an item; reset() restores the initial partition
    and the initial env values. accept() and cancel() close the session.
    """

    def __init__(
        self,
        to_install: Iterable[CatalogItem],
        available: Iterable[CatalogItem],
        env_defaults: Optional[Mapping[str, str]] = None,
    ):
        self._items: Dict[str, CatalogItem] = {}
        for item in chain(to_install, available):
            self._items.setdefault(item.name, item)
        self._initial_selected = frozenset(item.name for item in to_install)
        self._initial_envs = {key: (env_defaults or {}).get(key, ENV_DEFAULTS[key]) for key in TRACKED_ENV_KEYS}
        self._selected = set(self._initial_selected)
        self._envs = dict(self._initial_envs)
        self._state = SessionState.OPEN
        self._result: Optional[CustomizationResult] = None

    @classmethod
    def from_resolution(cls, resolution: CatalogResolution, env_defaults: Optional[Mapping[str, str]] = None):
        return cls(resolution.to_install, resolution.available, env_defaults)

    # queries
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def result(self) -> Optional[CustomizationResult]:
        return self._result

    def universe(self) -> FrozenSet[str]:
        return frozenset(self._items)

    def selected_names(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    def available_names(self) -> FrozenSet[str]:
        return frozenset(self._items.keys() - self._selected)

    def selected_items(self) -> List[CatalogItem]:
        return sorted((self._items[n] for n in self._selected), key=lambda i: i.name.lower())

    def available_items(self) -> List[CatalogItem]:
        return sorted((self._items[n] for n in self.available_names()), key=lambda i: i.name.lower())

    def envs(self) -> Dict[str, str]:
        return dict(self._envs)

    def initial_env(self, key: str) -> str:
        return self._initial_envs[key]

    # transitions
    def _require_open(self):
        if self._state is not SessionState.OPEN:
            raise SessionClosedError(f"customization session already {self._state.value}")

    def _check_known(self, names: Iterable[str]) -> List[str]:
        names = list(names)
        unknown = [n for n in names if n not in self._items]
        if unknown:
            raise KeyError(f"unknown package(s): {', '.join(sorted(unknown))}")
        return names

    def add_selected(self, names: Iterable[str]) -> None:
        """Move the named available items to selected."""
        self._require_open()
        self._selected.update(self._check_known(names))

    def add_all(self) -> None:
        self._require_open()
        self._selected = set(self._items)

    def remove_selected(self, names: Iterable[str]) -> None:
        """Move the named selected items back to available."""
        self._require_open()
        self._selected.difference_update(self._check_known(names))

    def remove_all(self) -> None:
        self._require_open()
        self._selected.clear()

    def reset(self) -> None:
        self._require_open()
        self._selected = set(self._initial_selected)
        self._envs = dict(self._initial_envs)

    def set_env(self, key: str, value: str) -> None:
        self._require_open()
        if key not in self._envs:
            raise KeyError(f"'{key}' is not a customizable environment variable")
        self._envs[key] = value.strip() if value else ""

    def set_env_from_folder(self, key: str, folder: str) -> str:
        """Set *key* to *folder* joined with the leaf name of its original value."""
        self._require_open()
        if key not in self._envs:
            raise KeyError(f"'{key}' is not a customizable environment variable")
        leaf = ntpath.basename(self._initial_envs[key].rstrip("\\/"))
        value = ntpath.join(folder, leaf) if leaf else folder
        self._envs[key] = value
        return value

    def accept(self) -> CustomizationResult:
        self._require_open()
        self._state = SessionState.ACCEPTED
        self._result = CustomizationResult(selected=frozenset(self._selected), envs=dict(self._envs))
        return self._result

    def cancel(self) -> None:
        self._require_open()
        self._state = SessionState.CANCELLED
        self._result = None
