# MIT License
# Copyright (c) 2020-2024 Pau Freixes

import pytest

from emselector import Address, ConstructionError, Network, ServerPool, resolve_address, resolve_addresses


class TestAddress:
    def test_tcp_attributes(self):
        address = resolve_address("localhost:11211")
        assert address.network is Network.tcp
        assert address.address == "localhost:11211"
        assert address.host == "localhost"
        assert address.port == 11211
        assert str(address) == "localhost:11211"

    def test_tcp_has_no_path(self):
        with pytest.raises(AttributeError):
            resolve_address("localhost:11211").path

    def test_unix_attributes(self):
        address = resolve_address("/tmp/memcached.sock")
        assert address.network is Network.unix
        assert address.address == "/tmp/memcached.sock"
        assert address.path == "/tmp/memcached.sock"

    def test_unix_has_no_host_port(self):
        address = resolve_address("/tmp/memcached.sock")
        with pytest.raises(AttributeError):
            address.host
        with pytest.raises(AttributeError):
            address.port

    def test_equality(self):
        assert resolve_address("localhost:11211") == Address(Network.tcp, "localhost:11211")
        assert resolve_address("localhost:11211") != resolve_address("localhost:11212")
        assert Address(Network.tcp, "memcached") != Address(Network.unix, "memcached")

    def test_hashable(self):
        addresses = {resolve_address("localhost:11211"), resolve_address("localhost:11211")}
        assert len(addresses) == 1

    def test_immutable(self):
        address = resolve_address("localhost:11211")
        with pytest.raises(AttributeError):
            address.address = "localhost:11212"

    def test_network_values(self):
        assert Network.tcp.value == "tcp"
        assert Network.unix.value == "unix"


class TestResolveAddress:
    @pytest.mark.parametrize(
        "endpoint, host, port",
        [
            ("localhost:11211", "localhost", 11211),
            ("10.0.0.1:11211", "10.0.0.1", 11211),
            ("memcache.test.com:11211", "memcache.test.com", 11211),
            ("memcache.test.com.:11211", "memcache.test.com.", 11211),
            ("[::1]:11211", "::1", 11211),
            ("[fe80::1%eth0]:11211", "fe80::1%eth0", 11211),
            (":11211", "", 11211),
            ("localhost:0", "localhost", 0),
            ("localhost:65535", "localhost", 65535),
            ("cache_1:11211", "cache_1", 11211),
        ],
    )
    def test_valid_tcp(self, endpoint, host, port):
        address = resolve_address(endpoint)
        assert address.network is Network.tcp
        assert address.address == endpoint
        assert address.host == host
        assert address.port == port

    @pytest.mark.parametrize("endpoint", ["/tmp/memcached.sock", "run/memcached.sock", "/"])
    def test_valid_unix(self, endpoint):
        address = resolve_address(endpoint)
        assert address.network is Network.unix
        assert address.path == endpoint

    @pytest.mark.parametrize(
        "endpoint",
        [
            "",
            "not a valid host",
            "not a valid host:11211",
            "localhost",
            "localhost:",
            "localhost:memcache",
            "localhost:70000",
            "localhost:-1",
            "localhost:+1",
            "localhost: 1",
            "localhost:1_1",
            "::1:11211",
            "[::1]",
            "[::1]11211",
            "[::1:11211",
            "[not-ipv6]:11211",
            "local]host:11211",
            "-localhost:11211",
            "local..host:11211",
            "a" * 64 + ":11211",
            "999.999.999.999:11211",
            "1.2.3:11211",
            "memcache.123:11211",
        ],
    )
    def test_invalid_tcp(self, endpoint):
        with pytest.raises(ConstructionError) as excinfo:
            resolve_address(endpoint)

        assert excinfo.value.endpoint == endpoint
        assert excinfo.value.network is Network.tcp
        assert repr(endpoint) in str(excinfo.value)

    def test_invalid_unix(self):
        with pytest.raises(ConstructionError) as excinfo:
            resolve_address("/tmp/memcached\x00.sock")

        assert excinfo.value.network is Network.unix

    def test_too_long_hostname(self):
        host = ".".join(["a" * 60] * 5)
        with pytest.raises(ConstructionError):
            resolve_address(f"{host}:11211")

    def test_not_a_string(self):
        with pytest.raises(ConstructionError):
            resolve_address(11211)

    def test_no_name_lookup(self, mocker):
        getaddrinfo = mocker.patch("socket.getaddrinfo")
        gethostbyname = mocker.patch("socket.gethostbyname")

        address = resolve_address("memcache.test.com:11211")

        # the configured name is kept, no IP is pinned
        assert address.host == "memcache.test.com"
        getaddrinfo.assert_not_called()
        gethostbyname.assert_not_called()


class TestResolveAddresses:
    def test_keeps_order(self):
        endpoints = ["10.0.0.2:11211", "/tmp/memcached.sock", "10.0.0.1:11211"]
        pool = resolve_addresses(endpoints)
        assert [address.address for address in pool] == endpoints

    def test_keeps_duplicates(self):
        pool = resolve_addresses(["localhost:11211", "localhost:11211"])
        assert len(pool) == 2
        assert pool[0] == pool[1]

    def test_empty(self):
        assert len(resolve_addresses([])) == 0

    def test_invalid_endpoint_aborts(self):
        with pytest.raises(ConstructionError) as excinfo:
            resolve_addresses(["localhost:11211", "not a valid host", "localhost:11212"])

        assert excinfo.value.endpoint == "not a valid host"

    def test_single_string_is_not_accepted(self):
        with pytest.raises(TypeError):
            resolve_addresses("localhost:11211")


class TestServerPool:
    @pytest.fixture
    def pool(self):
        return resolve_addresses(["localhost:11211", "localhost:11212", "localhost:11213"])

    def test_sequence(self, pool):
        assert len(pool) == 3
        assert pool[0].port == 11211
        assert pool[-1].port == 11213
        assert [address.port for address in pool] == [11211, 11212, 11213]
        assert resolve_address("localhost:11212") in pool
        assert pool.index(resolve_address("localhost:11213")) == 2

    def test_slice(self, pool):
        assert pool[1:] == resolve_addresses(["localhost:11212", "localhost:11213"])

    def test_equality_depends_on_order(self, pool):
        assert pool == resolve_addresses(["localhost:11211", "localhost:11212", "localhost:11213"])
        assert pool != resolve_addresses(["localhost:11213", "localhost:11212", "localhost:11211"])

    def test_immutable(self, pool):
        with pytest.raises(TypeError):
            pool[0] = resolve_address("localhost:11214")

    def test_repr(self):
        pool = ServerPool([resolve_address("localhost:11211"), resolve_address("/tmp/memcached.sock")])
        assert repr(pool) == "<ServerPool addresses=['localhost:11211', '/tmp/memcached.sock']>"
