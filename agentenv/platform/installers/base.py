#!/usr/bin/env python3
"""
agent-environment Base Installer Class
Base class for runtimes installed through an already-resolved tool
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from agentenv.console import debug
from agentenv.errors import DependentInstallFailure
from agentenv.layout import InstallRoot
from agentenv.platform.detector import PlatformId
from agentenv.platform.resolver import ResolvedTool
from agentenv.platform.runner import CommandResult, ToolRunner

# Installs download interpreters; give them room
INSTALL_TIMEOUT = 900
QUERY_TIMEOUT = 60

_ERROR_SNIPPET = 500


class DependentInstaller(ABC):
    """
    Abstract base class for check-then-install delegation

    Subclasses ask the managing tool whether the runtime is already there
    and only install when it is not.
    """

    def __init__(self, root: InstallRoot, platform_id: PlatformId, runner: ToolRunner):
        self.root = root
        self.platform = platform_id
        self.runner = runner

    @abstractmethod
    def tool_env(self) -> Dict[str, str]:
        """Environment variables pointing the managing tool into the install root"""

    @abstractmethod
    def ensure(self, tool: ResolvedTool, version: str):
        """
        Make sure the runtime version is available

        Args:
            tool: Resolved managing tool (uv or fnm)
            version: Runtime version to ensure

        Raises:
            DependentInstallFailure: the managing tool reported failure
        """

    def run_tool(self, tool: ResolvedTool, args: List[str],
                 timeout: Optional[float] = INSTALL_TIMEOUT) -> CommandResult:
        """
        Run the managing tool with our environment

        Args:
            tool: Resolved managing tool
            args: Subcommand and arguments
            timeout: Seconds before giving up

        Returns:
            CommandResult
        """
        cmd = [str(tool.path)] + list(args)
        debug(f"Running: {' '.join(cmd)}")
        return self.runner.run(cmd, env=self.tool_env(), timeout=timeout)

    @staticmethod
    def require_success(result: CommandResult, stage: str) -> CommandResult:
        """Raise DependentInstallFailure for a non-zero result"""
        if result.ok:
            return result
        detail = (result.stderr or result.stdout).strip()[:_ERROR_SNIPPET]
        message = f"{stage} failed (exit {result.returncode})"
        if detail:
            message = f"{message}: {detail}"
        raise DependentInstallFailure(message)
