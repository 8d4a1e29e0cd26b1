# MIT License
# Copyright (c) 2020-2024 Pau Freixes

from setuptools import find_packages, setup

setup(
    name="emselector",
    version="0.1.0",
    description="Server selection for memcached clients using CRC-32 modulo hashing",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*", "benchmark")),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest", "pytest-mock"],
    },
)
