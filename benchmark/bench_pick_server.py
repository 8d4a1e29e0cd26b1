# MIT License
# Copyright (c) 2020-2024 Pau Freixes

import time

from emselector import create_selector

NUM_ITERATIONS = 1_000_000
KEYS = [
    b"12345678",
    b"123456789101112123134",
    b"12345678123123123123123123123",
]


def pick_server(num_servers):
    # at least two servers for having the key hashed
    server_list = create_selector([f"127.0.0.1:{11211 + i}" for i in range(num_servers)])
    start = time.time()
    for i in range(NUM_ITERATIONS):
        for key in KEYS:
            server_list.pick_server(key)
    elapsed = time.time() - start
    print("Pick server with {} servers total time {}".format(num_servers, elapsed))


def pick_server_long_key(num_servers):
    server_list = create_selector([f"127.0.0.1:{11211 + i}" for i in range(num_servers)])
    key = b"x" * 1024
    start = time.time()
    for i in range(NUM_ITERATIONS):
        server_list.pick_server(key)
    elapsed = time.time() - start
    print("Pick server with a 1024 bytes key and {} servers total time {}".format(num_servers, elapsed))


pick_server(1)
pick_server(2)
pick_server(4)
pick_server(8)
pick_server(16)
pick_server_long_key(2)
