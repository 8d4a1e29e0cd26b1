# MIT License
# Copyright (c) 2020-2024 Pau Freixes

from ._address import Address, Network, ServerPool, resolve_address, resolve_addresses
from .base import SelectionStrategy, ServerSelector
from .buffer_pool import BufferPool, BufferPoolMetrics
from .client_errors import ConstructionError, KeyTooLongError, NoServersError, SelectorError
from .default_values import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_MAX_BUFFER_SIZE,
    DEFAULT_MAX_BUFFERS,
    DEFAULT_MAX_KEY_LENGTH,
)
from .selector import ServerList, create_selector
from .strategy import ModuloSelectionStrategy

__all__ = (
    "Address",
    "BufferPool",
    "BufferPoolMetrics",
    "ConstructionError",
    "create_selector",
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_MAX_BUFFER_SIZE",
    "DEFAULT_MAX_BUFFERS",
    "DEFAULT_MAX_KEY_LENGTH",
    "KeyTooLongError",
    "ModuloSelectionStrategy",
    "Network",
    "NoServersError",
    "resolve_address",
    "resolve_addresses",
    "SelectionStrategy",
    "SelectorError",
    "ServerList",
    "ServerPool",
    "ServerSelector",
)
