#!/usr/bin/env python3
"""
agent-environment Tool Runner
Process boundary for invoking uv, fnm and node
"""

import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one tool invocation"""
    returncode: int
    stdout: str = ''
    stderr: str = ''

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr together, for banner sniffing"""
        return '\n'.join(part for part in (self.stdout, self.stderr) if part)


class ToolRunner(ABC):
    """Run a tool with arguments and capture its output"""

    @abstractmethod
    def run(self, cmd: Sequence[str], env: Optional[Dict[str, str]] = None,
            timeout: Optional[float] = None) -> CommandResult:
        """
        Run a command

        Args:
            cmd: Executable and arguments
            env: Extra environment variables layered over the current ones
            timeout: Seconds before the process is killed (None = no limit)

        Returns:
            CommandResult; a missing executable is a non-zero result, not an exception
        """


class SubprocessRunner(ToolRunner):
    """ToolRunner backed by subprocess.run (never shell=True)"""

    def run(self, cmd: Sequence[str], env: Optional[Dict[str, str]] = None,
            timeout: Optional[float] = None) -> CommandResult:
        argv: List[str] = [str(part) for part in cmd]
        merged_env = None
        if env:
            merged_env = dict(os.environ)
            merged_env.update(env)

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                env=merged_env,
                timeout=timeout,
                check=False,
                shell=False,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(-1, '', f"Command timed out after {timeout}s")
        except OSError as e:
            return CommandResult(127, '', str(e))

        return CommandResult(result.returncode, result.stdout or '', result.stderr or '')
