#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""The declarative configuration document: packages to install and environment bindings.

The canonical on-disk form is XML:

    <config>
      <envs>
        <env name="COMMON_DIR" value="%ProgramData%\\_VM"/>
      </envs>
      <packages>
        <package name="example.vm"/>
      </packages>
    </config>

Paths ending in .yaml/.yml carry the same schema as YAML
(``{envs: [{name, value}], packages: [{name}]}``).
"""

import io
import os
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from vminstaller.vm_constants import TRACKED_ENV_KEYS
from vminstaller.installer.utils.exceptions import ConfigDocumentError

FORMAT_XML = "xml"
FORMAT_YAML = "yaml"

_ENV_REFERENCE_RE = re.compile(r"%([^%\s]+)%")


@dataclass(frozen=True)
class PackageRef:
    name: str


@dataclass(frozen=True)
class ConfigDocument:
    """An immutable package set plus environment mapping.

    Package names and env keys are unique; order is kept only so serialized
    output is stable.
    """

    packages: Tuple[PackageRef, ...] = ()
    envs: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        seen = set()
        for pkg in self.packages:
            if not pkg.name:
                raise ConfigDocumentError("<document>", "package with empty name")
            if pkg.name in seen:
                raise ConfigDocumentError("<document>", f"duplicate package '{pkg.name}'")
            seen.add(pkg.name)
        for key in self.envs:
            if not key:
                raise ConfigDocumentError("<document>", "environment variable with empty name")

    @classmethod
    def from_names(cls, names: Iterable[str], envs: Optional[Mapping[str, str]] = None) -> "ConfigDocument":
        return cls(packages=tuple(PackageRef(n) for n in names), envs=dict(envs or {}))

    def package_names(self) -> set:
        return {pkg.name for pkg in self.packages}

    def env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.envs.get(key, default)


###################################################################################################
# format detection


def document_format_for(path) -> str:
    suffix = Path(str(path)).suffix.lower()
    return FORMAT_YAML if suffix in (".yml", ".yaml") else FORMAT_XML


###################################################################################################
# parsing


def _parse_xml(text: str, source: str) -> ConfigDocument:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ConfigDocumentError(source, str(e))

    if root.tag != "config":
        raise ConfigDocumentError(source, f"root element is <{root.tag}>, expected <config>")

    envs = {}
    for env in root.findall("./envs/env"):
        name = env.get("name")
        if not name:
            raise ConfigDocumentError(source, "<env> without a name attribute")
        if name in envs:
            raise ConfigDocumentError(source, f"duplicate environment variable '{name}'")
        envs[name] = env.get("value", "")

    names = []
    for pkg in root.findall("./packages/package"):
        name = pkg.get("name")
        if not name:
            raise ConfigDocumentError(source, "<package> without a name attribute")
        if name in names:
            raise ConfigDocumentError(source, f"duplicate package '{name}'")
        names.append(name)

    return ConfigDocument.from_names(names, envs)


def _parse_yaml(text: str, source: str) -> ConfigDocument:
    try:
        yaml = YAML(typ="safe", pure=True)
        data = yaml.load(text) or {}
    except YAMLError as e:
        raise ConfigDocumentError(source, str(e))

    if not isinstance(data, dict):
        raise ConfigDocumentError(source, "document must contain a mapping at root level")

    envs = {}
    for entry in data.get("envs") or []:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ConfigDocumentError(source, f"invalid env entry {entry!r}")
        name = str(entry["name"])
        if name in envs:
            raise ConfigDocumentError(source, f"duplicate environment variable '{name}'")
        envs[name] = "" if entry.get("value") is None else str(entry["value"])

    names = []
    for entry in data.get("packages") or []:
        name = entry.get("name") if isinstance(entry, dict) else entry
        if not name:
            raise ConfigDocumentError(source, f"invalid package entry {entry!r}")
        name = str(name)
        if name in names:
            raise ConfigDocumentError(source, f"duplicate package '{name}'")
        names.append(name)

    return ConfigDocument.from_names(names, envs)


def parse_document(text: str, fmt: str = FORMAT_XML, source: str = "<string>") -> ConfigDocument:
    """Parse serialized document text; raises ConfigDocumentError when malformed."""
    if fmt == FORMAT_YAML:
        return _parse_yaml(text, source)
    return _parse_xml(text, source)


def read_document(path, fmt: Optional[str] = None) -> ConfigDocument:
    """Read and parse a document file, detecting the format from its suffix unless *fmt* is given."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigDocumentError(str(path), str(e))
    return parse_document(text, fmt or document_format_for(path), source=str(path))


###################################################################################################
# serialization


def _serialize_xml(doc: ConfigDocument) -> str:
    root = ET.Element("config")
    envs = ET.SubElement(root, "envs")
    for name, value in doc.envs.items():
        ET.SubElement(envs, "env", {"name": name, "value": value})
    packages = ET.SubElement(root, "packages")
    for pkg in doc.packages:
        ET.SubElement(packages, "package", {"name": pkg.name})
    ET.indent(root, space="  ")
    return '<?xml version="1.0" encoding="utf-8"?>\n' + ET.tostring(root, encoding="unicode") + "\n"


def _serialize_yaml(doc: ConfigDocument) -> str:
    data = {
        "envs": [{"name": name, "value": value} for name, value in doc.envs.items()],
        "packages": [{"name": pkg.name} for pkg in doc.packages],
    }
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.width = 4096  # prevent line wrapping
    out = io.StringIO()
    yaml.dump(data, out)
    return out.getvalue()


def serialize_document(doc: ConfigDocument, fmt: str = FORMAT_XML) -> str:
    if fmt == FORMAT_YAML:
        return _serialize_yaml(doc)
    return _serialize_xml(doc)


def write_document(doc: ConfigDocument, path) -> None:
    """Write the canonical form of *doc* to *path*, overwriting any existing file."""
    text = serialize_document(doc, document_format_for(path))
    target = Path(str(path))
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ConfigDocumentError(str(path), f"unable to write: {e}")


###################################################################################################
# customization merge


def apply_customization(doc: ConfigDocument, result) -> ConfigDocument:
    """Return a new document built from *doc* and an accepted customization result.

    The package set is replaced wholesale by the final selection. Tracked env
    keys are replaced by the session values; every other env entry is kept.
    """
    envs = dict(doc.envs)
    for key in TRACKED_ENV_KEYS:
        if key in result.envs:
            envs[key] = result.envs[key]
    return ConfigDocument.from_names(sorted(result.selected), envs)


###################################################################################################
# environment expansion


def _lookup(name: str, mapping: Mapping[str, str]) -> Optional[str]:
    if name in mapping:
        return mapping[name]
    lowered = name.lower()
    for key, value in mapping.items():
        if key.lower() == lowered:
            return value
    return None


def expand_env_value(
    value: str,
    envs: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Resolve %NAME% references, looking in *envs* first and then *environ*.

    Names are matched case-insensitively, as Windows does. Unknown references
    and references that would recurse into themselves are left as written.
    """
    envs = envs or {}
    environ = os.environ if environ is None else environ

    def _expand(text: str, stack: Tuple[str, ...]) -> str:
        def _replace(match):
            name = match.group(1)
            if name.lower() in stack:
                return match.group(0)
            replacement = _lookup(name, envs)
            if replacement is None:
                replacement = _lookup(name, environ)
            if replacement is None:
                return match.group(0)
            return _expand(replacement, stack + (name.lower(),))

        return _ENV_REFERENCE_RE.sub(_replace, text)

    return _expand(value or "", ())


def expanded_envs(doc: ConfigDocument, keys: Iterable[str], environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Expanded values for the requested keys that the document defines."""
    return {key: expand_env_value(doc.envs[key], doc.envs, environ) for key in keys if key in doc.envs}
