#!/usr/bin/env python3
"""
agent-environment Setup
Minimal setup.py for older pip/setuptools that cannot read pyproject.toml.
All configuration is in pyproject.toml.
"""
from setuptools import setup

# All configuration is in pyproject.toml
setup()
