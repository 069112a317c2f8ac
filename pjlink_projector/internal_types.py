# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used internally by this package; intended for "from .internal_types import *"."""

from typing import (
    Dict, List, Optional, Union, Any, Set, Tuple, Type, TypeVar,
    Callable, Awaitable, AsyncIterator, Iterable, Mapping, Sequence,
    FrozenSet, AsyncContextManager, TYPE_CHECKING,
  )

from types import TracebackType

from typing_extensions import Self

Jsonable = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
"""A type that can be serialized to JSON."""

JsonableDict = Dict[str, Jsonable]
"""A dictionary that can be serialized to JSON."""
