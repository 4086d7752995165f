"""
agent-environment - Self-contained agent toolchain bootstrapper
Provisions uv, Python, fnm and Node.js into a single per-user directory.
"""

__version__ = "0.3.0"
__author__ = "agent-environment contributors"
__license__ = "MIT"

__all__ = ["__version__"]
