#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import contextlib
import os
import platform
import re
import socket
import string
import sys

from collections.abc import Iterable
from datetime import datetime
from typing import Optional, Tuple


###################################################################################################
# print to stderr
def eprint(*args, **kwargs):
    filteredArgs = (
        {k: v for (k, v) in kwargs.items() if k not in ("timestamp", "flush")} if isinstance(kwargs, dict) else {}
    )
    if "timestamp" in kwargs and kwargs["timestamp"]:
        print(
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            *args,
            file=sys.stderr,
            **filteredArgs,
        )
    else:
        print(*args, file=sys.stderr, **filteredArgs)
    if "flush" in kwargs and kwargs["flush"]:
        sys.stderr.flush()


def clear_screen():
    os.system("cls" if platform.system() == "Windows" else "clear")


###################################################################################################
# test if a remote port is open
def check_socket(host, port, timeout=10):
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.settimeout(timeout)
        try:
            return sock.connect_ex((host, port)) == 0
        except (socket.gaierror, OSError):
            return False


###################################################################################################
def contains_whitespace(s):
    return True in [c in s for c in string.whitespace]


###################################################################################################
def flatten(coll):
    for i in coll:
        if isinstance(i, Iterable) and not isinstance(i, str):
            for subc in flatten(i):
                yield subc
        else:
            yield i


# if the object is an iterable, return it, otherwise return a tuple with it as a single element.
def get_iterable(x):
    if isinstance(x, Iterable) and not isinstance(x, str):
        return x
    else:
        return (x,)


###################################################################################################
def sizeof_fmt(num, suffix="B"):
    for unit in ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi"]:
        if abs(num) < 1024.0:
            return f"{num:3.1f}{unit}{suffix}"
        num /= 1024.0
    return f"{num:.1f}{'Yi'}{suffix}"


###################################################################################################
# convenient boolean argument parsing
def str2bool(v):
    if isinstance(v, bool):
        return v
    elif isinstance(v, str):
        if v.lower() in ("yes", "true", "t", "y", "1"):
            return True
        elif v.lower() in ("no", "false", "f", "n", "0", ""):
            return False
        else:
            raise ValueError("Boolean value expected")
    elif not v:
        return False
    else:
        raise ValueError("Boolean value expected")


###################################################################################################
# "5.1.19041.1" -> (5, 1, 19041, 1); non-numeric fragments are ignored
def version_tuple(val) -> Tuple[int, ...]:
    if val is None:
        return ()
    return tuple(int(x) for x in re.findall(r"\d+", str(val)))


def version_at_least(actual, minimum) -> bool:
    actual_parts = version_tuple(actual)
    if not actual_parts:
        return False
    minimum_parts = version_tuple(minimum)
    width = max(len(actual_parts), len(minimum_parts))
    return actual_parts + (0,) * (width - len(actual_parts)) >= minimum_parts + (0,) * (width - len(minimum_parts))


def first_line(output: list) -> Optional[str]:
    return next((line.strip() for line in output if line and line.strip()), None)


###################################################################################################
# single-quoted PowerShell string literal
def powershell_quote(value) -> str:
    return "'" + str(value).replace("'", "''") + "'"
