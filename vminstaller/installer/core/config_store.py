#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Load, locate and persist the configuration document."""

import os
import shutil
from typing import Iterable, List, Optional, TYPE_CHECKING
from urllib.parse import urlparse

import requests

from vminstaller.vm_common import DownloadToFile
from vminstaller.vm_constants import DEFAULT_CONFIG_URL
from vminstaller.installer.configs.constants.enums import ControlFlow
from vminstaller.installer.core.config_document import (
    ConfigDocument,
    document_format_for,
    read_document,
    write_document,
)
from vminstaller.installer.utils.exceptions import ConfigurationMissingError, FetchError
from vminstaller.installer.utils.logger_utils import InstallerLogger

if TYPE_CHECKING:
    from vminstaller.installer.ui.shared.installer_ui import InstallerUI


def is_remote_locator(locator: Optional[str]) -> bool:
    return bool(locator) and str(locator).lower().startswith(("http://", "https://"))


def source_path(locator: str) -> str:
    """Path portion of a locator, without any URL query string."""
    return urlparse(locator).path if is_remote_locator(locator) else locator


def fetch_to_path(locator: str, destination: str, debug: bool = False) -> str:
    """Place the file named by *locator* (local path or http(s) URL) at *destination*.

    Raises FetchError if it cannot be retrieved. No retries are attempted.
    """
    dest_dir = os.path.dirname(os.path.abspath(destination))
    try:
        os.makedirs(dest_dir, exist_ok=True)
    except OSError as e:
        raise FetchError(locator, f"cannot create {dest_dir}: {e}")

    if is_remote_locator(locator):
        try:
            if not DownloadToFile(locator, destination, debug=debug):
                raise FetchError(locator, "download was empty")
        except requests.exceptions.RequestException as e:
            raise FetchError(locator, str(e))
        except OSError as e:
            raise FetchError(locator, f"cannot write {destination}: {e}")

    elif locator and os.path.isfile(locator):
        try:
            if not (os.path.exists(destination) and os.path.samefile(locator, destination)):
                shutil.copyfile(locator, destination)
        except OSError as e:
            raise FetchError(locator, str(e))

    else:
        raise FetchError(str(locator), "no such file")

    InstallerLogger.debug(f"Retrieved {locator} to {destination}")
    return destination


def load_document(
    locator: Optional[str],
    working_path: str,
    ui: Optional["InstallerUI"] = None,
    non_interactive: bool = False,
    debug: bool = False,
) -> ConfigDocument:
    """Obtain the configuration document and parse it from *working_path*.

    The source is *locator* when given, otherwise the default URL. When the
    source cannot be retrieved an existing copy at *working_path* is used; if
    there is none the operator is asked once to place the file there. Declining
    (or having no one to ask) raises ConfigurationMissingError.

    A fetched source is parsed in the format its own suffix names; when that
    differs from the working copy's format the copy is rewritten canonically.
    """
    source = locator or DEFAULT_CONFIG_URL

    try:
        fetch_to_path(source, working_path, debug=debug)
        InstallerLogger.info(f"Configuration document obtained from {source}")
        source_format = document_format_for(source_path(source))
        if source_format != document_format_for(working_path):
            # the working copy always holds its own format
            doc = read_document(working_path, source_format)
            write_document(doc, working_path)
            return doc
        return read_document(working_path)
    except FetchError as e:
        InstallerLogger.warning(str(e))

        if os.path.isfile(working_path):
            InstallerLogger.info(f"Using existing configuration document at {working_path}")

        elif (ui is None) or non_interactive:
            raise ConfigurationMissingError(working_path)

        elif ui.ask_yes_no(
            f"Unable to obtain the configuration document.\n\n"
            f"Place a configuration file at {working_path} and choose Yes to retry.",
            default=False,
        ):
            if not os.path.isfile(working_path):
                raise ConfigurationMissingError(working_path)

        else:
            raise ConfigurationMissingError(working_path)

    return read_document(working_path)


def persist_document(
    doc: ConfigDocument,
    destinations: Iterable[str],
    control_flow: Optional[ControlFlow] = None,
) -> List[str]:
    """Write the canonical form of *doc* to each destination, returning the paths written."""
    written = []
    for dest in destinations:
        if control_flow and not control_flow.should_write_files():
            InstallerLogger.info(control_flow.would(f"write configuration document to {dest}"))
            continue
        write_document(doc, dest)
        InstallerLogger.debug(f"Configuration document written to {dest}")
        written.append(dest)
    return written
