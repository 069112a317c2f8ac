"""Tests for the pjlink-projector command-line tool, run against the emulator."""

import contextlib
import io
import json
import unittest

from pjlink_projector import __version__
from pjlink_projector.__main__ import arun
from pjlink_projector.emulator import PJLinkProjectorEmulator


class CliTests(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.emulator = PJLinkProjectorEmulator(password="secret", bind_addr='127.0.0.1', port=0)
        await self.emulator.start()
        self.base_args = ["-H", f"127.0.0.1:{self.emulator.port}", "--password", "secret"]

    async def asyncTearDown(self):
        self.emulator.close()
        await self.emulator.wait_closed()

    async def run_cli(self, *args):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            rc = await arun(self.base_args + list(args))
        return rc, stdout.getvalue(), stderr.getvalue()

    async def test_status(self):
        rc, out, _ = await self.run_cli("status")
        self.assertEqual(rc, 0)
        result = json.loads(out)
        self.assertEqual(result["command"], "POWR")
        self.assertEqual(result["power_status"], "Standby")

    async def test_power_on_off(self):
        rc, _, _ = await self.run_cli("power-on")
        self.assertEqual(rc, 0)
        self.assertEqual(self.emulator.properties["POWR"], "1")
        rc, _, _ = await self.run_cli("power-off")
        self.assertEqual(rc, 0)
        self.assertEqual(self.emulator.properties["POWR"], "0")

    async def test_get_and_set(self):
        rc, out, _ = await self.run_cli("get", "LAMP", "--array")
        self.assertEqual(rc, 0)
        self.assertEqual(json.loads(out), ["1200", "0"])
        rc, _, _ = await self.run_cli("set", "AVMT", "31")
        self.assertEqual(rc, 0)
        self.assertEqual(self.emulator.properties["AVMT"], "31")

    async def test_error_exit_code(self):
        rc, _, err = await self.run_cli("get", "SNUM")
        self.assertEqual(rc, 1)
        self.assertIn("pjlink-projector: error:", err)

    async def test_wrong_password(self):
        self.base_args[-1] = "wrong"
        rc, _, err = await self.run_cli("status")
        self.assertEqual(rc, 1)
        self.assertIn("password", err)

    async def test_version(self):
        rc, out, _ = await self.run_cli("version")
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), __version__)
