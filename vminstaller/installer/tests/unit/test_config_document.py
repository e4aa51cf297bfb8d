#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for the configuration document model and its XML/YAML forms."""

import os
import shutil
import tempfile
import unittest

from vminstaller.installer.core.config_document import (
    FORMAT_YAML,
    ConfigDocument,
    PackageRef,
    apply_customization,
    parse_document,
    read_document,
    serialize_document,
    write_document,
)
from vminstaller.installer.core.customization import CustomizationResult
from vminstaller.installer.utils.exceptions import ConfigDocumentError


SAMPLE_XML = """<?xml version="1.0" encoding="utf-8"?>
<config>
  <envs>
    <env name="COMMON_DIR" value="%ProgramData%\\_VM"/>
    <env name="TOOL_LIST_DIR" value="%ProgramData%\\Microsoft\\Windows\\Start Menu\\Programs\\Tools"/>
    <env name="RAW_TOOLS_DIR" value="%SystemDrive%\\Tools"/>
    <env name="EXTRA_SETTING" value="keep-me"/>
  </envs>
  <packages>
    <package name="7zip.vm"/>
    <package name="ghidra.vm"/>
    <package name="x64dbg.vm"/>
  </packages>
</config>
"""


class TestConfigDocumentParsing(unittest.TestCase):
    def test_parse_xml(self):
        doc = parse_document(SAMPLE_XML)
        self.assertEqual(doc.package_names(), {"7zip.vm", "ghidra.vm", "x64dbg.vm"})
        self.assertEqual(doc.env("COMMON_DIR"), r"%ProgramData%\_VM")
        self.assertEqual(doc.env("EXTRA_SETTING"), "keep-me")
        self.assertIsNone(doc.env("MISSING"))

    def test_wrong_root_element(self):
        with self.assertRaises(ConfigDocumentError):
            parse_document("<settings><packages/></settings>")

    def test_malformed_xml(self):
        with self.assertRaises(ConfigDocumentError):
            parse_document("<config><packages>")

    def test_duplicate_package_rejected(self):
        text = '<config><packages><package name="a.vm"/><package name="a.vm"/></packages></config>'
        with self.assertRaises(ConfigDocumentError):
            parse_document(text)

    def test_duplicate_env_rejected(self):
        text = '<config><envs><env name="A" value="1"/><env name="A" value="2"/></envs></config>'
        with self.assertRaises(ConfigDocumentError):
            parse_document(text)

    def test_package_without_name_rejected(self):
        with self.assertRaises(ConfigDocumentError):
            parse_document("<config><packages><package/></packages></config>")

    def test_empty_sections_allowed(self):
        doc = parse_document("<config/>")
        self.assertEqual(doc.packages, ())
        self.assertEqual(doc.envs, {})

    def test_direct_construction_rejects_duplicates(self):
        with self.assertRaises(ConfigDocumentError):
            ConfigDocument(packages=(PackageRef("a.vm"), PackageRef("a.vm")))

    def test_yaml_accepts_bare_package_names(self):
        doc = parse_document("packages:\n  - a.vm\n  - name: b.vm\nenvs: []\n", FORMAT_YAML)
        self.assertEqual(doc.package_names(), {"a.vm", "b.vm"})


class TestConfigDocumentRoundTrip(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.doc = parse_document(SAMPLE_XML)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_xml_file_roundtrip(self):
        path = os.path.join(self.temp_dir, "nested", "config.xml")
        write_document(self.doc, path)
        self.assertEqual(read_document(path), self.doc)

    def test_yaml_file_roundtrip(self):
        path = os.path.join(self.temp_dir, "config.yml")
        write_document(self.doc, path)
        with open(path, "r", encoding="utf-8") as f:
            self.assertIn("packages:", f.read())
        self.assertEqual(read_document(path), self.doc)

    def test_serialization_is_stable(self):
        first = serialize_document(self.doc)
        self.assertEqual(serialize_document(parse_document(first)), first)

    def test_read_missing_file(self):
        with self.assertRaises(ConfigDocumentError):
            read_document(os.path.join(self.temp_dir, "absent.xml"))


class TestApplyCustomization(unittest.TestCase):
    def test_packages_replaced_and_untracked_envs_kept(self):
        doc = parse_document(SAMPLE_XML)
        result = CustomizationResult(
            selected=frozenset({"ghidra.vm", "dnspy.vm"}),
            envs={"COMMON_DIR": r"D:\VM", "TOOL_LIST_DIR": r"D:\Tools", "RAW_TOOLS_DIR": r"D:\Raw"},
        )
        new_doc = apply_customization(doc, result)

        self.assertIsNot(new_doc, doc)
        self.assertEqual([p.name for p in new_doc.packages], ["dnspy.vm", "ghidra.vm"])
        self.assertEqual(new_doc.env("COMMON_DIR"), r"D:\VM")
        self.assertEqual(new_doc.env("EXTRA_SETTING"), "keep-me")
        # the original document is untouched
        self.assertIn("7zip.vm", doc.package_names())
        self.assertEqual(doc.env("COMMON_DIR"), r"%ProgramData%\_VM")


if __name__ == "__main__":
    unittest.main()
