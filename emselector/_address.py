import ipaddress
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple, Union, overload

from .client_errors import ConstructionError

logger = logging.getLogger(__name__)

MAX_HOSTNAME_LENGTH = 253

_hostname_label = re.compile(r"^[A-Za-z0-9_]([A-Za-z0-9_-]{0,61}[A-Za-z0-9_])?$")


class Network(str, Enum):
    tcp = "tcp"
    unix = "unix"


@dataclass(frozen=True)
class Address:
    """Data class for identifying univocally a Memcached server.

    Only the network and the configured string take part of the
    equality, the other attributes are derived from the string at
    resolve time.
    """

    network: Network
    address: str
    _host: Optional[str] = field(default=None, compare=False, repr=False)
    _port: Optional[int] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.address

    @property
    def host(self) -> str:
        if self.network is Network.unix:
            raise AttributeError("host not available on address using Unix socket")
        return self._host

    @property
    def port(self) -> int:
        if self.network is Network.unix:
            raise AttributeError("port not available on address using Unix socket")
        return self._port

    @property
    def path(self) -> str:
        if self.network is Network.tcp:
            raise AttributeError("path not available on address using TCP socket")
        return self.address


class ServerPool(Sequence):
    """Ordered and immutable list of addresses.

    The position of each address is what the selection uses, building
    a pool with the same addresses in a different order will route
    most of the keys to a different server.
    """

    _addresses: Tuple[Address, ...]

    __slots__ = ("_addresses",)

    def __init__(self, addresses: Iterable[Address] = ()) -> None:
        self._addresses = tuple(addresses)

    @overload
    def __getitem__(self, index: int) -> Address:
        ...

    @overload
    def __getitem__(self, index: slice) -> "ServerPool":
        ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Address, "ServerPool"]:
        if isinstance(index, slice):
            return ServerPool(self._addresses[index])
        return self._addresses[index]

    def __len__(self) -> int:
        return len(self._addresses)

    def __iter__(self) -> Iterator[Address]:
        return iter(self._addresses)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ServerPool):
            return NotImplemented
        return self._addresses == other._addresses

    def __hash__(self) -> int:
        return hash(self._addresses)

    def __repr__(self) -> str:
        return f"<ServerPool addresses={[str(address) for address in self._addresses]}>"


def _split_host_port(endpoint: str) -> Tuple[str, str]:
    if endpoint.startswith("["):
        end = endpoint.find("]")
        if end < 0:
            raise ValueError("missing ']' in address")
        host = endpoint[1:end]
        rest = endpoint[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError("missing port in address")
        port = rest[1:]
        try:
            ipaddress.IPv6Address(host.split("%", 1)[0])
        except ValueError:
            raise ValueError(f"invalid IPv6 address {host!r}")
        return host, port

    if ":" not in endpoint:
        raise ValueError("missing port in address")

    host, port = endpoint.rsplit(":", 1)
    if ":" in host:
        raise ValueError("too many colons in address")
    if "[" in host or "]" in host:
        raise ValueError("unexpected bracket in address")

    return host, port


def _validate_host(host: str) -> None:
    # empty host stands for any interface
    if not host:
        return

    try:
        ipaddress.IPv4Address(host)
        return
    except ValueError:
        pass

    if len(host) > MAX_HOSTNAME_LENGTH:
        raise ValueError(f"host name longer than {MAX_HOSTNAME_LENGTH} characters")

    labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
    if labels[-1].isdigit():
        # a numeric top level label is only valid as part of an IPv4 address
        raise ValueError(f"invalid IPv4 address {host!r}")

    for label in labels:
        if not _hostname_label.match(label):
            raise ValueError(f"invalid host name {host!r}")


def _validate_port(port: str) -> int:
    # int() would accept signs, spaces and underscores
    if not port.isdigit() or not port.isascii():
        raise ValueError(f"invalid port {port!r}")

    value = int(port)
    if value > 65535:
        raise ValueError(f"port {value} out of range")

    return value


def _resolve_tcp_address(endpoint: str) -> Address:
    try:
        host, port = _split_host_port(endpoint)
        if not endpoint.startswith("["):
            _validate_host(host)
        port_number = _validate_port(port)
    except ValueError as exc:
        raise ConstructionError(endpoint, Network.tcp, str(exc)) from exc

    return Address(Network.tcp, endpoint, host, port_number)


def _resolve_unix_address(endpoint: str) -> Address:
    if "\x00" in endpoint:
        raise ConstructionError(endpoint, Network.unix, "path contains a NUL byte")

    return Address(Network.unix, endpoint)


def resolve_address(endpoint: str) -> Address:
    """Return the `Address` for a configured endpoint string.

    Endpoints containing a `/` are considered Unix socket paths, any
    other endpoint must be a `host:port` pair. Only the syntax is
    checked, names are not looked up and the address keeps the
    literal string, so later DNS changes are never seen by the
    selection.

    Raises a `ConstructionError` if the endpoint can not be parsed.
    """
    if not isinstance(endpoint, str):
        raise ConstructionError(repr(endpoint), Network.tcp, f"endpoint must be a str, got {type(endpoint).__name__}")

    if "/" in endpoint:
        return _resolve_unix_address(endpoint)

    return _resolve_tcp_address(endpoint)


def resolve_addresses(endpoints: Sequence) -> ServerPool:
    """Return a `ServerPool` keeping the order of the given endpoints.

    Duplicated endpoints are kept. The first invalid endpoint aborts the
    resolution raising a `ConstructionError`, no partial pool is returned.
    """
    if isinstance(endpoints, (str, bytes)):
        raise TypeError("endpoints must be a sequence of strings, not a single string")

    pool = ServerPool([resolve_address(endpoint) for endpoint in endpoints])
    logger.debug(f"Resolved {len(pool)} addresses")
    return pool
