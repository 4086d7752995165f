#!/usr/bin/env python3
"""
agent-environment Bootstrap
Runs the install steps in order: uv, Python, venv, fnm, Node.js, env files, profile
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from agentenv.config import AgentEnvConfig
from agentenv.console import blank, info, ok
from agentenv.environment import EnvironmentMaterializer
from agentenv.errors import VerificationWarning
from agentenv.layout import InstallRoot
from agentenv.platform.detector import PlatformId, detect_shell, get_platform
from agentenv.platform.fetcher import Fetcher, HttpFetcher
from agentenv.platform.installers import NodeInstaller, PythonInstaller
from agentenv.platform.resolver import ResolvedTool, ToolResolver
from agentenv.platform.runner import SubprocessRunner, ToolRunner
from agentenv.platform.tools import FNM, UV
from agentenv.platform.version import SemVer
from agentenv.profile import ProfilePatcher, target_profile


@dataclass
class InstallReport:
    """What a successful run produced"""
    root: InstallRoot
    platform: PlatformId
    uv: ResolvedTool
    fnm: ResolvedTool
    node_version: Optional[SemVer] = None
    env_files: List[Path] = field(default_factory=list)
    profile: Optional[Path] = None
    profile_changed: bool = False
    warnings: List[VerificationWarning] = field(default_factory=list)


class Bootstrapper:
    """
    Sequential, idempotent installer

    Each step checks whether it is already satisfied before doing work, so a
    second run on the same machine needs no network access. The first fatal
    error stops the run; later steps are not attempted.
    """

    def __init__(self, config: AgentEnvConfig,
                 platform_id: Optional[PlatformId] = None,
                 runner: Optional[ToolRunner] = None,
                 fetcher: Optional[Fetcher] = None,
                 shell: Optional[str] = None,
                 home: Optional[Path] = None,
                 search_path: Optional[str] = None):
        """
        Args:
            config: Effective configuration
            platform_id: Platform (default: detected)
            runner: Process runner (default: subprocess)
            fetcher: Download capability (default: requests-based)
            shell: Login shell name for profile selection (default: $SHELL)
            home: User home for profile files (default: Path.home())
            search_path: PATH used for system tool lookups (default: $PATH)
        """
        self.config = config
        self.root = InstallRoot.at(config.home)
        self.platform = platform_id or get_platform()
        self.runner = runner or SubprocessRunner()
        self.fetcher = fetcher or HttpFetcher(
            timeout=config.download_timeout, retries=config.download_retries
        )
        self.shell = shell or detect_shell(self.platform)
        self.home = home

        self.resolver = ToolResolver(self.root, self.platform, self.runner, self.fetcher,
                                     search_path=search_path)
        self.python = PythonInstaller(self.root, self.platform, self.runner)
        self.node = NodeInstaller(self.root, self.platform, self.runner, self.resolver)
        self.materializer = EnvironmentMaterializer(self.root)
        self.patcher = ProfilePatcher()

    def run(self) -> InstallReport:
        """Run every step and print the summary"""
        blank()
        info("agent-environment installer")
        info(f"Install root: {self.root}")
        info(f"Platform: {self.platform}")
        blank()

        self.root.path.mkdir(parents=True, exist_ok=True)

        uv = self.resolver.resolve(UV, self.config.uv_version)
        blank()

        self.python.ensure(uv, self.config.python_version)
        blank()

        self.python.ensure_venv(uv, self.config.python_version)
        blank()

        fnm = self.resolver.resolve(FNM, self.config.fnm_version)
        blank()

        node_version = self.node.ensure(fnm, self.config.node_version)
        blank()

        info("Generating activation files...")
        env_files = self.materializer.write()
        blank()

        report = InstallReport(
            root=self.root,
            platform=self.platform,
            uv=uv,
            fnm=fnm,
            node_version=node_version,
            env_files=env_files,
            warnings=list(self.node.warnings),
        )

        if self.config.patch_profile:
            report.profile, report.profile_changed = self.patch_shell_profile()
        else:
            info("Skipping shell profile changes")
        blank()

        self.print_summary(report)
        return report

    def patch_shell_profile(self):
        """Add the activation line to the user's shell profile"""
        profile = target_profile(self.shell, self.platform, self.home)
        if profile.suffix == '.ps1':
            source_line = self.materializer.ps1_source_line()
        else:
            source_line = self.materializer.sh_source_line()
        return profile, self.patcher.patch(profile, source_line)

    def print_summary(self, report: InstallReport):
        ok("All done! Agent runtime environment is ready.")
        info(f"  AGENTS_HOME = {report.root}")
        info(f"  uv          = {report.uv.path} ({report.uv.origin.value})")
        info(f"  fnm         = {report.fnm.path} ({report.fnm.origin.value})")
        if report.node_version is not None:
            info(f"  node        = v{report.node_version}")
        if self.platform.is_windows:
            info(f"Activate now with: {self.materializer.ps1_source_line()}")
        else:
            info(f"Activate now with: {self.materializer.sh_source_line()}")
        blank()
