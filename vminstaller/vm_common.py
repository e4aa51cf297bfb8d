#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import getpass
import os
import shutil
import string
import sys

from enum import IntEnum, IntFlag, auto
from typing import Optional, Tuple

import requests

from vminstaller.vm_constants import VMINSTALLER_VERSION
from vminstaller.vm_utils import clear_screen, eprint, sizeof_fmt

Dialog = None
MainDialog = None

# Reasonable dialog bounds; used to reduce awkward wrapping in python-dialog
_DIALOG_MIN_WIDTH = 50
_DIALOG_MAX_WIDTH = 140
_DIALOG_MIN_HEIGHT = 7
_DIALOG_MAX_HEIGHT = 30

HTTP_USER_AGENT = f"vminstaller/{VMINSTALLER_VERSION}"


def _dialog_size_for(text: str) -> tuple[int, int]:
    """Compute a suitable (height, width) for a dialog widget.

    - Width fits the longest line with a small padding.
    - Height accounts for the number of text lines plus button area.
    """
    lines = str(text).splitlines() or [""]
    max_line = max((len(line) for line in lines), default=_DIALOG_MIN_WIDTH)
    width = max(_DIALOG_MIN_WIDTH, min(max_line + 4, _DIALOG_MAX_WIDTH))
    height = _DIALOG_MIN_HEIGHT + max(0, len(lines) - 1)
    height = max(_DIALOG_MIN_HEIGHT, min(height, _DIALOG_MAX_HEIGHT))
    return height, width


def _dialog_menu_width_for(choices) -> int:
    """Compute a suitable dialog width based on checklist choices."""
    max_tag = 0
    max_item = 0
    for ch in choices or []:
        if not (isinstance(ch, (list, tuple)) and len(ch) == 3):
            continue
        max_tag = max(max_tag, len(str(ch[0])))
        max_item = max(max_item, len(str(ch[1]) if ch[1] is not None else ""))
    width = max_tag + 2 + max_item + 8 + 6
    return max(_DIALOG_MIN_WIDTH, min(width, _DIALOG_MAX_WIDTH))


###################################################################################################
def DialogInit():
    global Dialog
    global MainDialog
    try:
        if not Dialog:
            from dialog import Dialog

        if not MainDialog:
            MainDialog = Dialog(dialog='dialog', autowidgetsize=True)
    except ImportError:
        Dialog = None
        MainDialog = None
    except Exception as e:
        # pythondialog is importable but the dialog program is not on this host
        eprint(f"Dialog interface unavailable: {e}")
        MainDialog = None


def DialogAvailable() -> bool:
    return MainDialog is not None


class UserInputDefaultsBehavior(IntFlag):
    DefaultsPrompt = auto()
    DefaultsAccept = auto()
    DefaultsNonInteractive = auto()


class UserInterfaceMode(IntFlag):
    InteractionDialog = auto()
    InteractionInput = auto()


class DialogBackException(Exception):
    pass


class DialogCanceledException(Exception):
    pass


class BoolOrExtra(IntEnum):
    FALSE = 0
    TRUE = 1
    EXTRA = 2


###################################################################################################
def str2boolorextra(v):
    if isinstance(v, bool):
        return BoolOrExtra.TRUE if v else BoolOrExtra.FALSE
    elif isinstance(v, str):
        if v.lower() in ("yes", "true", "t", "y", "1"):
            return BoolOrExtra.TRUE
        elif v.lower() in ("no", "false", "f", "n", "0"):
            return BoolOrExtra.FALSE
        elif v.lower() in ("b", "back", "p", "previous", "e", "extra"):
            return BoolOrExtra.EXTRA
        else:
            raise ValueError("BoolOrExtra value expected")
    else:
        raise ValueError("BoolOrExtra value expected")


###################################################################################################
# get interactive user response to Y/N question
def YesOrNo(
    question,
    default=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
    clearScreen=False,
    yesLabel='Yes',
    noLabel='No',
):
    if (default is not None) and (
        (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept)
        and (defaultBehavior & UserInputDefaultsBehavior.DefaultsNonInteractive)
    ):
        reply = ""

    elif (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        defaultYes = (default is not None) and str2boolorextra(default)
        _h, _w = _dialog_size_for(str(question))
        code = MainDialog.yesno(
            str(question),
            yes_label=str(yesLabel),
            no_label=str(noLabel),
            defaultno=not defaultYes,
            height=_h,
            width=_w,
        )
        if code == Dialog.ESC:
            raise DialogCanceledException(question)
        reply = 'y' if (code == Dialog.OK) else 'n'

    elif uiMode & UserInterfaceMode.InteractionInput:
        if (default is not None) and defaultBehavior & UserInputDefaultsBehavior.DefaultsPrompt:
            if str2boolorextra(default):
                questionStr = f"\n{question} (Y / n): "
            else:
                questionStr = f"\n{question} (y / N): "
        else:
            questionStr = f"\n{question} (Y / N): "

        while True:
            reply = str(input(questionStr)).lower().strip()
            if len(reply) > 0:
                try:
                    str2boolorextra(reply)
                    break
                except ValueError:
                    pass
            elif (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept) and (default is not None):
                break

    else:
        raise RuntimeError("No user interfaces available")

    if (len(reply) == 0) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept):
        reply = "y" if (default is not None) and str2boolorextra(default) else "n"

    if clearScreen is True:
        clear_screen()

    result = str2boolorextra(reply)
    if result == BoolOrExtra.EXTRA:
        raise DialogBackException(question)

    return bool(result)


###################################################################################################
# get interactive user response
def AskForString(
    question,
    default=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
    clearScreen=False,
):
    if (default is not None) and (
        (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept)
        and (defaultBehavior & UserInputDefaultsBehavior.DefaultsNonInteractive)
    ):
        reply = default

    elif (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        _h, _w = _dialog_size_for(str(question))
        code, reply = MainDialog.inputbox(
            str(question),
            init=(
                default
                if (default is not None) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsPrompt)
                else ""
            ),
            height=_h,
            width=_w,
        )
        if (code == Dialog.CANCEL) or (code == Dialog.ESC):
            raise DialogCanceledException(question)
        else:
            reply = reply.strip()

    elif uiMode & UserInterfaceMode.InteractionInput:
        reply = str(
            input(
                f"\n{question}{f' ({default})' if default and (defaultBehavior & UserInputDefaultsBehavior.DefaultsPrompt) else ''}: "
            )
        ).strip()
        if (len(reply) == 0) and (default is not None) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept):
            reply = default

    else:
        raise RuntimeError("No user interfaces available")

    if clearScreen is True:
        clear_screen()

    return reply


def AskForStrings(
    prompt,
    labels,
    defaults=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
    clearScreen=False,
    visibleInputLength=60,
    maxInputLength=1024,
):
    if (defaults is not None) and (
        (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept)
        and (defaultBehavior & UserInputDefaultsBehavior.DefaultsNonInteractive)
    ):
        reply = list(defaults)

    elif (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        label_width = max(len(label) for label in labels) if labels else 0
        field_col = 1 + label_width + 2

        elements = [
            (
                label,
                i + 1,
                1,
                (
                    defaults[i]
                    if defaults and (defaults[i] is not None) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsPrompt)
                    else ""
                ),
                i + 1,
                field_col,
                visibleInputLength,
                maxInputLength,
            )
            for i, label in enumerate(labels)
        ]

        code, reply = MainDialog.form(
            prompt,
            elements,
            height=len(elements) + 6,
            width=field_col + visibleInputLength + 5,
            form_height=len(elements),
        )
        if (code == Dialog.CANCEL) or (code == Dialog.ESC):
            raise DialogCanceledException(prompt)
        else:
            reply = [x.strip() for x in reply]

    elif uiMode & UserInterfaceMode.InteractionInput:
        print(f"\n{prompt}")

        reply = []
        for i, label in enumerate(labels):
            default = (
                defaults[i]
                if defaults and (defaults[i] is not None) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsPrompt)
                else None
            )
            value = str(input(f"\n{label}{f' ({default})' if default else ''}: ")).strip()
            if (len(value) == 0) and (default is not None) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept):
                reply.append(default)
            else:
                reply.append(value)

    else:
        raise RuntimeError("No user interfaces available")

    if clearScreen is True:
        clear_screen()

    return reply


###################################################################################################
# get interactive password (without echoing)
def AskForPassword(
    prompt,
    default=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
    clearScreen=False,
):
    if (default is not None) and (
        (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept)
        and (defaultBehavior & UserInputDefaultsBehavior.DefaultsNonInteractive)
    ):
        reply = default

    elif (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        _h, _w = _dialog_size_for(str(prompt))
        code, reply = MainDialog.passwordbox(str(prompt), insecure=True, height=_h, width=_w)
        if (code == Dialog.CANCEL) or (code == Dialog.ESC):
            raise DialogCanceledException(prompt)

    elif uiMode & UserInterfaceMode.InteractionInput:
        reply = getpass.getpass(prompt=f"{prompt}: ")

    else:
        raise RuntimeError("No user interfaces available")

    if clearScreen is True:
        clear_screen()

    return reply


###################################################################################################
# Choose multiple of many
# choices - an iterable of (tag, item, status) tuples where status specifies the initial
# selected/unselected state of each entry (True meaning selected)
def ChooseMultiple(
    prompt,
    choices=[],
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
    clearScreen=False,
):
    validChoices = [x for x in choices if len(x) == 3 and isinstance(x[0], str) and isinstance(x[2], bool)]
    defaulted = [x[0] for x in validChoices if x[2] is True]

    if (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept) and (
        defaultBehavior & UserInputDefaultsBehavior.DefaultsNonInteractive
    ):
        reply = defaulted

    elif (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        _h, _w = _dialog_size_for(str(prompt))
        _w = max(_w, _dialog_menu_width_for(validChoices))
        code, reply = MainDialog.checklist(
            str(prompt),
            choices=validChoices,
            height=max(_h, 20),
            width=_w,
        )
        if code == Dialog.CANCEL or code == Dialog.ESC:
            raise DialogCanceledException(prompt)

    elif uiMode & UserInterfaceMode.InteractionInput:
        allowedChars = set(string.digits + ',' + ' ')
        defaultValListStr = ",".join(defaulted)
        print("0: NONE")
        for index, choice in enumerate(validChoices, start=1):
            print(f"{index}: {choice[0]}{f' - {choice[1]}' if isinstance(choice[1], str) and len(choice[1]) > 0 else ''}")
        while True:
            inputRaw = input(
                f"{prompt}{f' ({defaultValListStr})' if (len(defaultValListStr) > 0) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsPrompt) else ''}: "
            ).strip()
            if (len(inputRaw) == 0) and (len(defaulted) > 0) and (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept):
                reply = defaulted
                break
            elif inputRaw == '0':
                reply = []
                break
            elif (len(inputRaw) > 0) and (set(inputRaw) <= allowedChars):
                reply = []
                selectedIndexes = sorted(set([int(x.strip()) - 1 for x in inputRaw.split(',') if (len(x.strip())) > 0]))
                for idx in selectedIndexes:
                    if idx > -1 and idx < len(validChoices):
                        reply.append(validChoices[idx][0])
                if len(reply) > 0:
                    break

    else:
        raise RuntimeError("No user interfaces available")

    if clearScreen is True:
        clear_screen()

    return reply


###################################################################################################
# choose a directory; dialog mode uses the dselect widget, input mode asks for a path
def SelectDirectory(
    prompt,
    default=None,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
):
    if (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        start = default if default and os.path.isdir(default) else os.path.abspath(os.sep)
        code, reply = MainDialog.dselect(start, title=str(prompt), height=12, width=_DIALOG_MAX_WIDTH // 2)
        if (code == Dialog.CANCEL) or (code == Dialog.ESC):
            raise DialogCanceledException(prompt)
        return reply.strip()
    else:
        return AskForString(
            prompt,
            default=default,
            defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
            uiMode=UserInterfaceMode.InteractionInput,
        )


###################################################################################################
# display a message to the user without feedback
def DisplayMessage(
    message,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt,
    uiMode=UserInterfaceMode.InteractionDialog | UserInterfaceMode.InteractionInput,
    clearScreen=False,
):
    reply = False

    if (defaultBehavior & UserInputDefaultsBehavior.DefaultsAccept) and (
        defaultBehavior & UserInputDefaultsBehavior.DefaultsNonInteractive
    ):
        reply = True

    elif (uiMode & UserInterfaceMode.InteractionDialog) and (MainDialog is not None):
        _h, _w = _dialog_size_for(str(message))
        code = MainDialog.msgbox(str(message), height=_h, width=_w, no_collapse=True)
        if (code == Dialog.CANCEL) or (code == Dialog.ESC):
            raise DialogCanceledException(message)
        else:
            reply = True

    else:
        print(f"{message}")
        reply = True

    if clearScreen is True:
        clear_screen()

    return reply


###################################################################################################
# installer wrappers: consistent default handling across the TUI and DUI installers
def InstallerDisplayMessage(
    message,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
    uiMode=UserInterfaceMode.InteractionInput | UserInterfaceMode.InteractionDialog,
):
    return DisplayMessage(message, defaultBehavior=defaultBehavior, uiMode=uiMode)


def InstallerYesOrNo(
    question,
    default=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
    uiMode=UserInterfaceMode.InteractionInput | UserInterfaceMode.InteractionDialog,
    yesLabel='Yes',
    noLabel='No',
):
    return YesOrNo(
        question,
        default=default,
        defaultBehavior=defaultBehavior,
        uiMode=uiMode,
        yesLabel=yesLabel,
        noLabel=noLabel,
    )


def InstallerAskForString(
    question,
    default=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
    uiMode=UserInterfaceMode.InteractionInput | UserInterfaceMode.InteractionDialog,
):
    return AskForString(question, default=default, defaultBehavior=defaultBehavior, uiMode=uiMode)


def InstallerAskForPassword(
    question,
    default=None,
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
    uiMode=UserInterfaceMode.InteractionInput | UserInterfaceMode.InteractionDialog,
):
    return AskForPassword(question, default=default, defaultBehavior=defaultBehavior, uiMode=uiMode)


def InstallerChooseMultiple(
    prompt,
    choices=[],
    defaultBehavior=UserInputDefaultsBehavior.DefaultsPrompt | UserInputDefaultsBehavior.DefaultsAccept,
    uiMode=UserInterfaceMode.InteractionInput | UserInterfaceMode.InteractionDialog,
):
    return ChooseMultiple(prompt, choices=choices, defaultBehavior=defaultBehavior, uiMode=uiMode)


###################################################################################################
# download a remote file; True only when something non-empty landed on disk
def DownloadToFile(url, local_filename, debug=False, timeout=60):
    r = requests.get(url, stream=True, allow_redirects=True, timeout=timeout, headers={'User-Agent': HTTP_USER_AGENT})
    r.raise_for_status()
    with open(local_filename, 'wb') as f:
        for chunk in r.iter_content(chunk_size=1024):
            if chunk:
                f.write(chunk)
    fExists = os.path.isfile(local_filename)
    fSize = os.path.getsize(local_filename) if fExists else 0
    if debug:
        eprint(f"Download of {url} to {local_filename} {'succeeded' if fExists else 'failed'} ({sizeof_fmt(fSize)})")
    return fExists and (fSize > 0)


###################################################################################################
# issue an HTTPS GET and return (status, reason)
def test_http_connection(url, timeout=15) -> Tuple[int, str]:
    try:
        r = requests.get(url, timeout=timeout, allow_redirects=True, headers={'User-Agent': HTTP_USER_AGENT})
        return r.status_code, r.reason
    except requests.exceptions.RequestException as e:
        return 400, f"Error: {e}"


###################################################################################################
# Platform detection utilities


def get_platform_name() -> str:
    """Determine the current host platform name.

    Returns:
        Platform name string: 'linux', 'macos', 'windows', or 'unknown'
    """
    plat = sys.platform
    if plat.startswith("linux"):
        return "linux"
    elif plat == "darwin":
        return "macos"
    elif plat.startswith("win"):
        return "windows"
    else:
        return "unknown"


def disk_free_bytes(path: Optional[str] = None) -> int:
    """Return free bytes on the filesystem that contains *path* (system drive by default)."""
    if path is None:
        path = os.environ.get("SystemDrive", os.path.abspath(os.sep))
        if path.endswith(":"):
            path = path + os.sep
    try:
        return shutil.disk_usage(path).free
    except (OSError, FileNotFoundError):
        return 0
