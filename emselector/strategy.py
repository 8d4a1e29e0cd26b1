# MIT License
# Copyright (c) 2020-2024 Pau Freixes

import zlib

from .base import SelectionStrategy


class ModuloSelectionStrategy(SelectionStrategy):
    """Selects the server at the position given by the CRC-32 (IEEE)
    checksum of the key modulo the number of servers.

    This is not consistent hashing, adding, removing or reordering
    servers moves almost every key to a different server. Same servers
    in the same order always give the same server for a key.
    """

    __slots__ = ()

    def select_index(self, key: memoryview, pool_size: int) -> int:
        return zlib.crc32(key) % pool_size

    def __repr__(self) -> str:
        return "<ModuloSelectionStrategy>"
