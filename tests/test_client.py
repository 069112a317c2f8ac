"""End-to-end tests of the projector client against the emulator and scripted TCP servers."""

import asyncio
import contextlib
import hashlib
import socket
import unittest

from pjlink_projector import (
    PJLinkProjectorClient,
    PJLinkRequest,
    pjlink_exchange,
    PJLinkAuthenticationError,
    PJLinkCommandRejectedError,
    PJLinkConnectionError,
    PJLinkEmptyResponseError,
    PJLinkGreetingError,
    PJLinkReadTimeoutError,
    PJLinkResponseError,
    PJLinkUnknownCommandError,
    PJLinkUnsupportedClassError,
    TcpPJLinkClientTransport,
)
from pjlink_projector.emulator import PJLinkProjectorEmulator

SEED = "abcdef12"
PASSWORD = "JBMIAProjectorLink"


class ScriptedProjector:
    """ A TCP server that sends a fixed greeting and a fixed reply to each connection. """

    def __init__(self, greeting, reply):
        # None means send nothing.
        self.greeting = greeting
        # None means hang up without replying.
        self.reply = reply
        self.received = []
        self.connections = 0
        self.port = None
        # Set when the client closes its end of a connection.
        self.eof = asyncio.Event()

    async def handle(self, reader, writer):
        self.connections += 1
        try:
            if self.greeting is None:
                # Say nothing; wait for the client to give up.
                await reader.read()
                self.eof.set()
                return
            writer.write(self.greeting)
            await writer.drain()
            try:
                line = await reader.readuntil(b'\r')
            except asyncio.IncompleteReadError as e:
                self.received.append(e.partial)
                self.eof.set()
                return
            self.received.append(line)
            if self.reply is None:
                return
            writer.write(self.reply)
            await writer.drain()
            await reader.read()
            self.eof.set()
        finally:
            writer.close()


@contextlib.asynccontextmanager
async def scripted_projector(greeting, reply):
    projector = ScriptedProjector(greeting, reply)
    server = await asyncio.start_server(projector.handle, '127.0.0.1', 0)
    projector.port = server.sockets[0].getsockname()[1]
    try:
        yield projector
    finally:
        server.close()


def unused_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


def make_client(port, password="", read_timeout_secs=2.0, **kwargs):
    return PJLinkProjectorClient(
        '127.0.0.1',
        password,
        port=port,
        connect_timeout_secs=2.0,
        read_timeout_secs=read_timeout_secs,
        **kwargs
    )


class PowerTests(unittest.IsolatedAsyncioTestCase):
    """ Power control against a scripted device. """

    async def test_turn_on_ok(self):
        async with scripted_projector(b'PJLINK 0\r', b'%1POWR=OK\r') as projector:
            response = await make_client(projector.port).turn_on()
            self.assertTrue(response.success)
            self.assertEqual(projector.received, [b'%1POWR 1\r'])

    async def test_turn_on_rejected(self):
        async with scripted_projector(b'PJLINK 0\r', b'%1POWR=ERR3\r') as projector:
            with self.assertRaises(PJLinkCommandRejectedError) as cm:
                await make_client(projector.port).turn_on()
            self.assertIn("could not turn on", str(cm.exception))
            self.assertEqual(cm.exception.response.value, "ERR3")

    async def test_turn_off_ok(self):
        async with scripted_projector(b'PJLINK 0\r', b'%1POWR=OK\r') as projector:
            await make_client(projector.port).turn_off()
            self.assertEqual(projector.received, [b'%1POWR 0\r'])

    async def test_turn_off_rejected(self):
        async with scripted_projector(b'PJLINK 0\r', b'%1POWR=ERR4\r') as projector:
            with self.assertRaises(PJLinkCommandRejectedError) as cm:
                await make_client(projector.port).turn_off()
            self.assertIn("could not turn off", str(cm.exception))

    async def test_power_status(self):
        async with scripted_projector(b'PJLINK 0\r', b'%1POWR=3\r') as projector:
            client = make_client(projector.port)
            response = await client.get_power_status()
            self.assertEqual(response.tokens, ("3",))
            self.assertEqual(await client.power_status_str(), "Warming")
            self.assertEqual(projector.received, [b'%1POWR ?\r'] * 2)


class AuthTests(unittest.IsolatedAsyncioTestCase):
    """ MD5 challenge/response authentication. """

    async def test_digest_prefix(self):
        async with PJLinkProjectorEmulator(password=PASSWORD, bind_addr='127.0.0.1', port=0, seed=SEED) as emulator:
            client = make_client(emulator.port, password=PASSWORD)
            self.assertEqual(await client.power_status_str(), "Standby")
            digest = hashlib.md5((SEED + PASSWORD).encode()).hexdigest().encode()
            self.assertEqual(emulator.received_lines, [digest + b'%1POWR ?'])

    async def test_wrong_password(self):
        async with PJLinkProjectorEmulator(password=PASSWORD, bind_addr='127.0.0.1', port=0, seed=SEED) as emulator:
            with self.assertRaises(PJLinkAuthenticationError):
                await make_client(emulator.port, password="wrong").get_power_status()

    async def test_missing_password(self):
        async with PJLinkProjectorEmulator(password=PASSWORD, bind_addr='127.0.0.1', port=0) as emulator:
            with self.assertRaises(PJLinkAuthenticationError):
                await make_client(emulator.port, password="").get_power_status()
            self.assertEqual(emulator.received_lines, [b'%1POWR ?'])

    async def test_password_without_challenge(self):
        async with PJLinkProjectorEmulator(bind_addr='127.0.0.1', port=0) as emulator:
            await make_client(emulator.port, password=PASSWORD).get_power_status()
            self.assertEqual(emulator.received_lines, [b'%1POWR ?'])

    async def test_random_seed_per_connection(self):
        async with PJLinkProjectorEmulator(password=PASSWORD, bind_addr='127.0.0.1', port=0) as emulator:
            client = make_client(emulator.port, password=PASSWORD)
            await client.get_power_status()
            await client.get_power_status()
            self.assertEqual(len(emulator.received_lines), 2)


class GreetingTests(unittest.IsolatedAsyncioTestCase):

    async def test_lenient_unknown_greeting(self):
        async with scripted_projector(b'HELLO 1 abcdef12\r', b'%1NAME=room1\r') as projector:
            value = await make_client(projector.port, password=PASSWORD).get_property("NAME")
            self.assertEqual(value, "room1")
            self.assertEqual(projector.received, [b'%1NAME ?\r'])

    async def test_strict_unknown_greeting(self):
        async with scripted_projector(b'HELLO\r', b'%1NAME=room1\r') as projector:
            with self.assertRaises(PJLinkGreetingError):
                await make_client(projector.port, strict_greeting=True).get_property("NAME")


class PropertyTests(unittest.IsolatedAsyncioTestCase):
    """ Generic property access against the emulator. """

    async def asyncSetUp(self):
        self.emulator = PJLinkProjectorEmulator(bind_addr='127.0.0.1', port=0)
        await self.emulator.start()
        self.client = make_client(self.emulator.port)

    async def asyncTearDown(self):
        self.emulator.close()
        await self.emulator.wait_closed()

    async def test_get_property(self):
        self.assertEqual(await self.client.get_property("NAME"), "pjlink-emulator")
        self.assertEqual(await self.client.get_property("CLSS"), "1")

    async def test_get_property_array(self):
        self.assertEqual(await self.client.get_property_array("LAMP"), ["1200", "0"])
        self.assertEqual(await self.client.get_property_array("INST"), ["11", "21", "31", "32", "51"])

    async def test_set_property(self):
        await self.client.turn_on()
        await self.client.set_property("INPT", "11")
        self.assertEqual(await self.client.get_property("INPT"), "11")

    async def test_set_property_ignores_device_error(self):
        # projector is in standby, so the emulator answers ERR3
        await self.client.set_property("INPT", "11")
        self.assertEqual(self.emulator.properties["INPT"], "31")

    async def test_unknown_property(self):
        with self.assertRaises(PJLinkUnknownCommandError):
            await self.client.get_property("FREZ")
        self.assertEqual(self.emulator.next_session_id, 0)

    async def test_one_connection_per_operation(self):
        await self.client.get_power_status()
        await self.client.turn_on()
        await self.client.get_property("NAME")
        self.assertEqual(self.emulator.next_session_id, 3)
        self.assertEqual(self.emulator.properties["POWR"], "1")

    async def test_concurrent_operations(self):
        values = await asyncio.gather(*[self.client.get_property("POWR") for _ in range(5)])
        self.assertEqual(values, ["0"] * 5)
        self.assertEqual(self.emulator.next_session_id, 5)

    async def test_transact_by_name(self):
        response = await self.client.transact_by_name("NAME", "?")
        self.assertEqual(response.command, "NAME")
        self.assertEqual(response.value, "pjlink-emulator")
        response = await self.client.transact_by_name("POWR", "1")
        self.assertTrue(response.success)
        self.assertEqual(self.emulator.properties["POWR"], "1")

    async def test_input_type_str(self):
        self.assertEqual(await self.client.input_type_str(), "Digital")
        self.emulator.properties["INPT"] = "52"
        self.assertEqual(await self.client.input_type_str(), "Network")
        self.emulator.properties["INPT"] = "91"
        self.assertEqual(await self.client.input_type_str(), "91")

    async def test_scripted_reply(self):
        self.emulator.replies["POWR"] = "ERR3"
        with self.assertRaises(PJLinkCommandRejectedError) as cm:
            await self.client.turn_on()
        self.assertEqual(cm.exception.response.error_code, "ERR3")
        self.assertEqual(self.emulator.properties["POWR"], "0")

    async def test_pjlink_exchange(self):
        response = await pjlink_exchange('127.0.0.1', PJLinkRequest.query("INF1"), port=self.emulator.port)
        self.assertEqual(response.command, "INF1")
        self.assertEqual(response.value, "PJLinkEmu")


class FailureTests(unittest.IsolatedAsyncioTestCase):

    async def test_validation_before_connect(self):
        client = make_client(unused_port())
        with self.assertRaises(PJLinkUnsupportedClassError):
            await client.send_request(PJLinkRequest(2, "SNUM", "?"))

    async def test_connection_refused(self):
        port = unused_port()
        with self.assertRaises(PJLinkConnectionError) as cm:
            await make_client(port).get_power_status()
        self.assertIn(f"127.0.0.1:{port}", str(cm.exception))
        self.assertIsNotNone(cm.exception.__cause__)

    async def test_empty_reply(self):
        async with scripted_projector(b'PJLINK 0\r', None) as projector:
            with self.assertRaises(PJLinkEmptyResponseError):
                await make_client(projector.port).get_power_status()

    async def test_silent_device_times_out(self):
        # Without a read deadline this would block forever.
        async with scripted_projector(None, None) as projector:
            with self.assertRaises(PJLinkReadTimeoutError) as cm:
                await make_client(projector.port, read_timeout_secs=0.3).get_power_status()
            self.assertIsInstance(cm.exception, PJLinkConnectionError)
            self.assertNotIsInstance(cm.exception, PJLinkResponseError)

    async def test_malformed_reply(self):
        async with scripted_projector(b'PJLINK 0\r', b'garbage\r') as projector:
            with self.assertRaises(PJLinkResponseError):
                await make_client(projector.port).get_power_status()

    async def test_transport_sends_nothing_for_class2_request(self):
        async with scripted_projector(b'PJLINK 0\r', b'%2SNUM=1234\r') as projector:
            transport = TcpPJLinkClientTransport('127.0.0.1', port=projector.port, read_timeout_secs=2.0)
            with self.assertRaises(PJLinkUnsupportedClassError):
                async with transport:
                    await transport.exchange(PJLinkRequest(2, "SNUM", "?"))
            await asyncio.wait_for(projector.eof.wait(), 2.0)
            self.assertEqual(projector.received, [b''])
            self.assertTrue(transport.closed)

    async def test_transport_closes_after_malformed_reply(self):
        async with scripted_projector(b'PJLINK 0\r', b'garbage\r') as projector:
            transport = TcpPJLinkClientTransport('127.0.0.1', port=projector.port, read_timeout_secs=2.0)
            with self.assertRaises(PJLinkResponseError):
                async with transport:
                    await transport.exchange(PJLinkRequest.query("POWR"))
            await asyncio.wait_for(projector.eof.wait(), 2.0)
            self.assertEqual(projector.received, [b'%1POWR ?\r'])
            self.assertTrue(transport.closed)
