#!/usr/bin/env python3
"""
agent-environment Node.js Installer
Node.js major version provisioned through fnm
"""

from typing import Dict, List, Optional

from agentenv.console import info, ok, warn
from agentenv.errors import VerificationWarning
from agentenv.layout import InstallRoot
from agentenv.platform.detector import PlatformId
from agentenv.platform.installers.base import QUERY_TIMEOUT, DependentInstaller
from agentenv.platform.resolver import ResolvedTool, ToolResolver
from agentenv.platform.runner import CommandResult, ToolRunner
from agentenv.platform.tools import NODE
from agentenv.platform.version import SemVer, parse

# fnm exits non-zero on some releases when the version is already present
_ALREADY_INSTALLED = ('already installed', 'version already installed')


class NodeInstaller(DependentInstaller):
    """Installs a Node.js major with fnm and makes it the default"""

    def __init__(self, root: InstallRoot, platform_id: PlatformId, runner: ToolRunner,
                 resolver: ToolResolver):
        super().__init__(root, platform_id, runner)
        # Only the system stage is used: a node on PATH above the floor wins
        self.resolver = resolver
        self.warnings: List[VerificationWarning] = []

    def tool_env(self) -> Dict[str, str]:
        return {'FNM_DIR': str(self.root.fnm_dir)}

    def ensure(self, fnm: ResolvedTool, version: str) -> Optional[SemVer]:
        """
        Make Node.js `version` (a major, e.g. "20") available

        Returns:
            Version of the node that will be used, or None if it could not be verified
        """
        info(f"Ensuring Node.js v{version}...")

        system_node = self.resolver.find_system(NODE)
        if system_node is not None:
            return system_node.version

        installed = self.installed_version(fnm, version)
        if installed is not None:
            ok(f"Node.js v{installed} already installed in {self.root.fnm_dir}")
        else:
            self.root.fnm_dir.mkdir(parents=True, exist_ok=True)
            result = self.run_tool(fnm, ['install', version])
            if not result.ok:
                if any(marker in result.output.lower() for marker in _ALREADY_INSTALLED):
                    info(f"Node.js v{version} already installed in {self.root.fnm_dir}")
                else:
                    self.require_success(result, f"fnm install {version}")

        # Local alias update only; run every time so the default tracks the configured major
        result = self.run_tool(fnm, ['default', version], timeout=QUERY_TIMEOUT)
        self.require_success(result, f"fnm default {version}")

        if installed is not None:
            return installed
        return self.verify(fnm, version)

    def installed_version(self, fnm: ResolvedTool, version: str) -> Optional[SemVer]:
        """Version of an fnm-managed node matching `version`, or None when none is installed"""
        if not self.root.fnm_dir.is_dir():
            return None
        result = self._exec_node_version(fnm, version)
        return parse(result.stdout) if result.ok else None

    def verify(self, fnm: ResolvedTool, version: str) -> Optional[SemVer]:
        """Check node actually runs inside fnm's environment; failure is only a warning"""
        result = self._exec_node_version(fnm, version)
        node_version = parse(result.stdout) if result.ok else None
        if node_version is None:
            self._warn(VerificationWarning(
                f"Node.js v{version} was installed by fnm but `node --version` could not be run"
            ))
            return None

        ok(f"Node.js installed: v{node_version}")
        return node_version

    def _exec_node_version(self, fnm: ResolvedTool, version: str) -> CommandResult:
        return self.run_tool(
            fnm, ['exec', f'--using={version}', '--', 'node', '--version'], timeout=QUERY_TIMEOUT
        )

    def _warn(self, warning: VerificationWarning):
        self.warnings.append(warning)
        warn(str(warning))
