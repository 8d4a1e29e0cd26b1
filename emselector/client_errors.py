# MIT License
# Copyright (c) 2020-2024 Pau Freixes


class SelectorError(Exception):
    """Base exception for the server selection"""


class ConstructionError(SelectorError):
    """Error raised when one of the configured endpoints can not be
    parsed as an address of the network it was classified as.

    No server list is built when this error is raised, the caller
    decides if it aborts, retries with a different configuration or
    continues with a reduced list of endpoints.
    """

    def __init__(self, endpoint: str, network: str, cause: str) -> None:
        self.endpoint = endpoint
        self.network = network
        self.cause = cause
        # enum members render as "Network.tcp" with str()
        network_name = getattr(network, "value", network)
        super().__init__(f"can't resolve {network_name} address {endpoint!r}: {cause}")


class NoServersError(SelectorError):
    """Error raised when a server is requested from a server list
    that has no servers configured.
    """

    def __init__(self) -> None:
        super().__init__("no servers configured or available")


class KeyTooLongError(SelectorError):
    """Error raised when a key is longer than the maximum key length
    configured for the server list.
    """

    def __init__(self, key_length: int, max_key_length: int) -> None:
        self.key_length = key_length
        self.max_key_length = max_key_length
        super().__init__(f"key of {key_length} bytes is longer than the maximum allowed of {max_key_length} bytes")
