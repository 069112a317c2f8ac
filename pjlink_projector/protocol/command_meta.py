#!/usr/bin/env python3

"""
PJLink known command mnemonics and metadata.

This module contains the known command mnemonics and response code tables for the
PJLink protocol, as published by the Japan Business Machine and Information
System Industries Association (JBMIA).

There is no protocol implementation here; only metadata about the protocol.
"""
from __future__ import annotations

from types import MappingProxyType

from ..internal_types import *

CLASS1_COMMANDS: FrozenSet[str] = frozenset([
    "POWR",   # Power control / power status query
    "INST",   # Input terminal list query
    "INPT",   # Input switch / input status query
    "AVMT",   # Mute control / mute status query
    "ERST",   # Error status query
    "LAMP",   # Lamp number/lighting hours query
    "NAME",   # Projector name query
    "INF1",   # Manufacturer name query
    "INF2",   # Product name query
    "INFO",   # Other information query
    "CLSS",   # Class information query
  ])
"""Command mnemonics defined by PJLink class 1."""

CLASS2_COMMANDS: FrozenSet[str] = frozenset([
    "SNUM",   # Serial number query
    "SVER",   # Software version query
    "INNM",   # Input terminal name query
    "IRES",   # Input resolution query
    "RRES",   # Recommended resolution query
    "FILT",   # Filter usage time query
    "RLMP",   # Lamp replacement model number query
    "RFIL",   # Filter replacement model number query
    "SVOL",   # Speaker volume adjustment
    "MVOL",   # Microphone volume adjustment
    "FREZ",   # Freeze control / freeze status query
  ])
"""Command mnemonics defined by PJLink class 2. Recognized, but never sent."""

COMMANDS_BY_CLASS: Mapping[int, FrozenSet[str]] = MappingProxyType({
    1: CLASS1_COMMANDS,
    2: CLASS2_COMMANDS,
  })
"""Read-only map of PJLink class to the command mnemonics valid for that class."""

def is_valid_command(pjlink_class: int, command: str) -> bool:
    """Returns True iff command is a known mnemonic for the given PJLink class."""
    commands = COMMANDS_BY_CLASS.get(pjlink_class)
    return commands is not None and command in commands

QUERY_PARAMETER = "?"
"""The parameter sent to query the current value of a property."""

SUCCESS_RESPONSE = "OK"
"""The response value for a successfully executed set command."""

error_code_map: Mapping[str, str] = MappingProxyType({
    "ERR1": "Undefined command",
    "ERR2": "Out of parameter",
    "ERR3": "Unavailable time",
    "ERR4": "Projector/Display failure",
    "ERRA": "Authentication error",
  })
"""Error codes a projector may send in place of a response value, and their meanings."""

power_status_map: Mapping[str, str] = MappingProxyType({
    "0": "Standby",
    "1": "On",
    "2": "Cooling",
    "3": "Warming",
  })
"""Response values for the POWR ? query, and the power states they correspond to."""

input_type_map: Mapping[str, str] = MappingProxyType({
    "1": "RGB",
    "2": "Video",
    "3": "Digital",
    "4": "Storage",
    "5": "Network",
  })
"""First digit of an INPT input number, and the input type it selects."""

av_mute_map: Mapping[str, str] = MappingProxyType({
    "11": "Video mute on",
    "21": "Audio mute on",
    "31": "Video and audio mute on",
    "30": "Video and audio mute off",
  })
"""Response values for the AVMT ? query."""
