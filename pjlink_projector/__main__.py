#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging

from pjlink_projector.internal_types import *

from pjlink_projector import (
    __version__ as pkg_version,
    PJLinkProjectorClient,
    PJLinkClientConfig,
    power_status_map,
  )
from pjlink_projector.emulator import PJLinkProjectorEmulator

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def get_client(self) -> PJLinkProjectorClient:
        args = self._args
        config = PJLinkClientConfig(
            host=args.host,
            password=args.password,
            port=args.port,
            connect_timeout_secs=args.timeout,
            read_timeout_secs=args.read_timeout,
            strict_greeting=True if args.strict_greeting else None,
          )
        if config.host is None:
            raise CmdExitError(1, "A projector host is required (use -H or set PJLINK_PROJECTOR_HOST)")
        return PJLinkProjectorClient(config=config)

    def pretty_print(self, value: Jsonable) -> None:
        print(json.dumps(value, indent=2, sort_keys=True))

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_status(self) -> int:
        client = self.get_client()
        response = await client.get_power_status()
        result = response.to_jsonable()
        result["power_status"] = power_status_map.get(response.value, response.value)
        self.pretty_print(result)
        return 0

    async def cmd_power_on(self) -> int:
        client = self.get_client()
        await client.turn_on()
        return 0

    async def cmd_power_off(self) -> int:
        client = self.get_client()
        await client.turn_off()
        return 0

    async def cmd_get(self) -> int:
        client = self.get_client()
        name: str = self._args.property_name
        if self._args.array:
            self.pretty_print(await client.get_property_array(name))
        else:
            self.pretty_print(await client.get_property(name))
        return 0

    async def cmd_set(self) -> int:
        client = self.get_client()
        await client.set_property(self._args.property_name, self._args.value)
        return 0

    async def cmd_emulator(self) -> int:
        emulator = PJLinkProjectorEmulator(
            password=self._args.password,
            bind_addr=self._args.bind_addr,
            port=self._args.port if self._args.port is not None else self._args.emulator_port,
          )
        await emulator.run()
        return 0

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the pjlink-projector command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Control a projector via the PJLink protocol.")

        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('-H', '--host', dest='host', default=None,
                            help='''The projector hostname or IPV4 address, optionally suffixed with ":<port>".
                                    Default: $PJLINK_PROJECTOR_HOST''')
        parser.add_argument('-p', '--port', dest='port', type=int, default=None,
                            help='''The projector TCP/IP port. Default: $PJLINK_PROJECTOR_PORT or 4352''')
        parser.add_argument('--password', dest='password', default=None,
                            help='''The projector password. Default: $PJLINK_PROJECTOR_PASSWORD, or no password''')
        parser.add_argument('--timeout', dest='timeout', type=float, default=None,
                            help='''The connect timeout, in seconds. Default: $PJLINK_PROJECTOR_TIMEOUT or 10''')
        parser.add_argument('--read-timeout', dest='read_timeout', type=float, default=None,
                            help='''The timeout for each line read from the projector, in seconds.
                                    Default: $PJLINK_PROJECTOR_READ_TIMEOUT or 10''')
        parser.add_argument('--strict-greeting', dest='strict_greeting', action='store_true', default=False,
                            help='Fail if the projector greeting is not a recognized PJLink greeting')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        # ======================= status

        parser_status = subparsers.add_parser('status', description="Display the power status of the projector")
        parser_status.set_defaults(func=self.cmd_status)

        # ======================= power-on

        parser_power_on = subparsers.add_parser('power-on', description="Turn the projector on")
        parser_power_on.set_defaults(func=self.cmd_power_on)

        # ======================= power-off

        parser_power_off = subparsers.add_parser('power-off', description="Turn the projector off")
        parser_power_off.set_defaults(func=self.cmd_power_off)

        # ======================= get

        parser_get = subparsers.add_parser('get', description="Query a PJLink class 1 property")
        parser_get.add_argument('property_name', help='The 4-character command mnemonic, e.g., "LAMP"')
        parser_get.add_argument('--array', action='store_true', default=False,
                            help='Display all response tokens rather than only the first')
        parser_get.set_defaults(func=self.cmd_get)

        # ======================= set

        parser_set = subparsers.add_parser('set', description="Set a PJLink class 1 property")
        parser_set.add_argument('property_name', help='The 4-character command mnemonic, e.g., "INPT"')
        parser_set.add_argument('value', help='The new value')
        parser_set.set_defaults(func=self.cmd_set)

        # ======================= emulator

        parser_emulator = subparsers.add_parser('emulator', description="Run a PJLink projector emulator")
        parser_emulator.add_argument('-b', '--bind', dest='bind_addr', default='0.0.0.0',
                            help='''The local address to listen on. Default: 0.0.0.0''')
        parser_emulator.add_argument('--emulator-port', dest='emulator_port', type=int, default=4352,
                            help='''The port to listen on if --port is not given. Default: 4352''')
        parser_emulator.set_defaults(func=self.cmd_emulator)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"pjlink-projector: error: {ex}", file=sys.stderr)
        except BaseException as ex:
            print(f"pjlink-projector: Unhandled exception: {ex}", file=sys.stderr)
            raise

        return rc

    def run(self) -> int:
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            rc = loop.run_until_complete(self.arun())
        finally:
            loop.close()
        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
