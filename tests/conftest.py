# MIT License
# Copyright (c) 2020-2024 Pau Freixes

import time

import pytest


@pytest.fixture
def endpoints():
    return ["10.0.0.1:11211", "10.0.0.2:11211", "10.0.0.3:11211"]


@pytest.fixture
def unix_socket_endpoint():
    return "/tmp/emselector.sock"


@pytest.fixture(scope="session")
def key_generation():
    def _():
        cnt = 0
        base = time.time()
        while True:
            yield str(base + cnt).encode()
            cnt += 1

    return _()
