#!/usr/bin/env python3
"""
agent-environment Python Installer
Python interpreter and venv provisioned through uv
"""

from typing import Dict, Optional

from agentenv.console import info, ok
from agentenv.platform.installers.base import QUERY_TIMEOUT, DependentInstaller
from agentenv.platform.resolver import ResolvedTool


class PythonInstaller(DependentInstaller):
    """Installs a Python version with `uv python install` and seeds the venv"""

    def tool_env(self) -> Dict[str, str]:
        return {'UV_PYTHON_INSTALL_DIR': str(self.root.python_dir)}

    def find(self, uv: ResolvedTool, version: str) -> Optional[str]:
        """
        Ask uv for an installed interpreter matching version

        Returns:
            Interpreter path reported by uv, or None if uv found nothing
        """
        result = self.run_tool(uv, ['python', 'find', version], timeout=QUERY_TIMEOUT)
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def ensure(self, uv: ResolvedTool, version: str):
        info(f"Ensuring Python {version}...")

        found = self.find(uv, version)
        if found:
            ok(f"Python {version} already available: {found}")
            return

        info(f"Installing Python {version} via uv...")
        self.root.python_dir.mkdir(parents=True, exist_ok=True)
        result = self.run_tool(uv, ['python', 'install', version])
        self.require_success(result, f"uv python install {version}")
        ok(f"Python {version} installed")

    def ensure_venv(self, uv: ResolvedTool, version: str):
        """
        Create <root>/venv once, seeded with pip

        An existing venv interpreter is taken as proof the venv is usable;
        it is not inspected further.
        """
        info("Setting up Python venv...")

        venv_python = self.root.venv_python(self.platform)
        if venv_python.exists():
            ok(f"Venv already exists: {self.root.venv_dir}")
            return

        result = self.run_tool(uv, [
            'venv', str(self.root.venv_dir),
            '--python', version,
            '--seed',
        ])
        self.require_success(result, f"uv venv {self.root.venv_dir}")
        ok(f"Venv created: {self.root.venv_dir} (with pip)")
