import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vsphere_config.config.config_loader import HOCON_EXAMPLE, Config
from vsphere_config.config.sources import RawSource, read_env, required_env_present
from vsphere_config.core.exceptions import InvalidConfigFileError
from vsphere_config.core.settings import HostSettings

LOG = logging.getLogger("vsphere_config.tests")


class TestParseText(unittest.TestCase):
    def test_example_parses(self):
        src = Config.parse_text(LOG, HOCON_EXAMPLE, "example.conf")
        self.assertEqual(src.host, "vcenter.example.com")
        self.assertEqual(src.port, 443)
        self.assertIs(src.insecure, False)
        self.assertEqual(src.origin, "example.conf")

    def test_no_section(self):
        self.assertIsNone(Config.parse_text(LOG, "", "empty.conf"))
        self.assertIsNone(Config.parse_text(LOG, "vcenter: null", "null.conf"))

    def test_nested_optional_value_is_invalid(self):
        text = 'vcenter { host: "h", user: "u", password: "p", port: { value: 1 } }'
        with self.assertRaisesRegex(InvalidConfigFileError, "'vcenter.port' must be a scalar"):
            Config.parse_text(LOG, text, "nested.conf")

    def test_unknown_keys_warn(self):
        text = 'vcenter { host: "h", user: "u", password: "p", cluster: "c1" }'
        with self.assertLogs(LOG, level="WARNING") as logs:
            src = Config.parse_text(LOG, text, "extra.conf")
        self.assertEqual(src.supplied(), ["host", "user", "password"])
        self.assertIn("cluster", logs.output[0])

    def test_blank_values_lists_lines(self):
        text = 'vcenter {\n  host: "h"\n  user:\n  vcenter.port = # later\n}\n'
        self.assertEqual(Config.blank_values(text), [(3, "user"), (4, "port")])
        self.assertEqual(Config.blank_values(HOCON_EXAMPLE), [])

    def test_value_holding_next_key_is_invalid(self):
        text = 'vcenter { host: "h", user: "password: hunter2", password: "p" }'
        with self.assertRaisesRegex(InvalidConfigFileError, "'vcenter.user' has no value of its own") as cm:
            Config.parse_text(LOG, text, "shifted.conf")
        self.assertNotIn("hunter2", str(cm.exception))

    def test_dotted_keys(self):
        src = Config.parse_text(LOG, 'vcenter.host = "h"\nvcenter.port = 8443', "dotted.conf")
        self.assertEqual(src.host, "h")
        self.assertEqual(src.port, 8443)


class TestLoadOne(unittest.TestCase):
    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as td:
            self.assertIsNone(Config.load_one(LOG, Path(td) / "vsphere.conf"))

    def test_directory_is_skipped(self):
        with tempfile.TemporaryDirectory() as td:
            self.assertIsNone(Config.load_one(LOG, td))

    def test_not_utf8(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "vsphere.conf"
            p.write_bytes(b"\xff\xfe\x00garbage")
            with self.assertRaisesRegex(InvalidConfigFileError, "could not be read"):
                Config.load_one(LOG, p)


class TestSources(unittest.TestCase):
    def test_read_env_passes_values_through(self):
        src = read_env({"VCENTER_SERVER": "h", "VCENTER_SSL": "no", "PATH": "/bin"})
        self.assertEqual(src.host, "h")
        self.assertEqual(src.ssl, "no")
        self.assertIsNone(src.user)
        self.assertEqual(src.origin, "env")

    def test_required_env_present(self):
        self.assertFalse(required_env_present({"VCENTER_SERVER": "h", "VCENTER_USER": "u"}))
        self.assertTrue(required_env_present({"VCENTER_SERVER": "h", "VCENTER_USER": "u", "VCENTER_PASSWORD": ""}))

    def test_missing_required_keeps_canonical_order(self):
        self.assertEqual(RawSource(user="u").missing_required(), ["host", "password"])
        self.assertEqual(RawSource().missing_required(), ["host", "user", "password"])

    def test_overlay(self):
        merged = RawSource(origin="file", host="f", user="f", port=443).overlay(RawSource(origin="env", host="e"))
        self.assertEqual((merged.host, merged.user, merged.port), ("e", "f", 443))
        self.assertEqual(merged.origin, "file+env")

    def test_repr_hides_password(self):
        self.assertNotIn("hunter2", repr(RawSource(password="hunter2")))


class TestHostSettings(unittest.TestCase):
    def test_override(self):
        hs = HostSettings.detect({"VSPHERE_CONFDIR": "/opt/vsphere"})
        self.assertEqual(hs.confdir, Path("/opt/vsphere"))
        self.assertEqual(hs.config_file(), Path("/opt/vsphere/vsphere.conf"))

    def test_root(self):
        with mock.patch.object(os, "geteuid", return_value=0, create=True):
            self.assertEqual(HostSettings.detect({}).confdir, Path("/etc/vsphere"))

    def test_user(self):
        with mock.patch.object(os, "geteuid", return_value=1000, create=True):
            hs = HostSettings.detect({})
        self.assertEqual(hs.confdir, Path("~/.config/vsphere").expanduser())

    def test_config_file_is_repeatable(self):
        hs = HostSettings(Path("/does/not/exist"))
        self.assertEqual(hs.config_file(), hs.config_file())


if __name__ == "__main__":
    unittest.main()
