#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Derive the default selection and the addable packages from the document and the package index."""

import json
import os
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

from vminstaller.installer.configs.constants.enums import ControlFlow
from vminstaller.installer.core.config_document import ConfigDocument
from vminstaller.installer.utils.logger_utils import InstallerLogger


@dataclass(frozen=True)
class CatalogItem:
    name: str
    version: str = ""

    def label(self) -> str:
        return f"{self.name} {self.version}".strip()


@dataclass(frozen=True)
class CatalogResolution:
    to_install: Tuple[CatalogItem, ...]
    available: Tuple[CatalogItem, ...]

    def to_install_names(self) -> set:
        return {item.name for item in self.to_install}

    def available_names(self) -> set:
        return {item.name for item in self.available}


IndexEntries = Iterable[Union[CatalogItem, Tuple[str, str], str]]


def _as_item(entry) -> CatalogItem:
    if isinstance(entry, CatalogItem):
        return entry
    if isinstance(entry, (tuple, list)):
        return CatalogItem(str(entry[0]), str(entry[1]) if len(entry) > 1 and entry[1] is not None else "")
    return CatalogItem(str(entry))


def resolve(
    doc: ConfigDocument,
    installed_names: Iterable[str],
    full_index: IndexEntries,
    excluded: Iterable[str] = (),
) -> CatalogResolution:
    """Split the world into what the document still needs and what could be added.

    to_install = doc.packages - installed
    available  = index - doc.packages - installed - excluded

    Package identifiers are compared case-insensitively.
    """
    installed = {n.lower() for n in installed_names}
    blocked = {n.lower() for n in excluded}
    wanted = {n.lower() for n in doc.package_names()}

    versions = {}
    index_items = []
    for entry in full_index:
        item = _as_item(entry)
        key = item.name.lower()
        if key in versions:
            continue
        versions[key] = item.version
        index_items.append(item)

    to_install = tuple(
        sorted(
            (CatalogItem(pkg.name, versions.get(pkg.name.lower(), "")) for pkg in doc.packages if pkg.name.lower() not in installed),
            key=lambda i: i.name.lower(),
        )
    )
    available = tuple(
        sorted(
            (
                item
                for item in index_items
                if item.name.lower() not in wanted
                and item.name.lower() not in installed
                and item.name.lower() not in blocked
            ),
            key=lambda i: i.name.lower(),
        )
    )

    InstallerLogger.debug(f"Catalog: {len(to_install)} to install, {len(available)} available to add")
    return CatalogResolution(to_install=to_install, available=available)


class PackageIndexCache:
    """JSON file holding the last package index query.

    Entries never expire; delete the file (or pass refresh=True to get()) to re-query.
    """

    def __init__(self, path: str):
        self.path = path

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def load(self) -> Optional[List[CatalogItem]]:
        if not self.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            InstallerLogger.warning(f"Ignoring unreadable package index cache {self.path}: {e}")
            return None
        if not isinstance(data, list):
            InstallerLogger.warning(f"Ignoring malformed package index cache {self.path}")
            return None
        return [CatalogItem(str(d.get("name", "")), str(d.get("version", ""))) for d in data if isinstance(d, dict) and d.get("name")]

    def store(self, items: Iterable[CatalogItem]) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([{"name": i.name, "version": i.version} for i in items], f, indent=2)

    def get(
        self,
        query: Callable[[], Iterable[CatalogItem]],
        refresh: bool = False,
        control_flow: Optional[ControlFlow] = None,
    ) -> List[CatalogItem]:
        """Return the cached index, running *query* only when there is no usable cache."""
        if not refresh:
            cached = self.load()
            if cached is not None:
                InstallerLogger.debug(f"Using cached package index {self.path} ({len(cached)} entries)")
                return cached

        InstallerLogger.info("Querying package index (this may take a while)")
        items = [_as_item(i) for i in query()]
        if control_flow and not control_flow.should_write_files():
            InstallerLogger.info(control_flow.would(f"cache package index to {self.path}"))
        else:
            try:
                self.store(items)
            except OSError as e:
                InstallerLogger.warning(f"Unable to cache package index to {self.path}: {e}")
        return items
