#!/usr/bin/env python3

from setuptools import setup

setup(
    name="kdguard",
    version="0.1.0",
    description="Generate secure passwords and check their strength",
    packages=["kdguard", "kdguard.backend"],
    python_requires=">=3.7",
    install_requires=[
        "cryptography",
        "PyNaCl",
        "prompt_toolkit",
        "blessed",
        "pyperclip",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["kdguard=kdguard.main:main"],
    },
)
