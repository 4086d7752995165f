#!/usr/bin/env python3
"""
agent-environment Activation Files
Generates env.sh / env.ps1 pointing a shell at the install root
"""

import os
import tempfile
from pathlib import Path
from typing import List

from agentenv.console import ok
from agentenv.layout import InstallRoot

_PLACEHOLDER = '@AGENTS_HOME@'

ENV_SH_TEMPLATE = """\
# agent-environment: source this file to activate the agent runtime.
# Usage: . "@AGENTS_HOME@/env.sh"

export AGENTS_HOME="@AGENTS_HOME@"
export PATH="$AGENTS_HOME/venv/bin:$AGENTS_HOME/bin:$PATH"
export UV_PYTHON_INSTALL_DIR="$AGENTS_HOME/python"
export FNM_DIR="$AGENTS_HOME/fnm"

# Activate fnm-managed Node.js if fnm is available
if command -v fnm >/dev/null 2>&1; then
    eval "$(fnm env)"
fi
"""

ENV_PS1_TEMPLATE = """\
# agent-environment: dot-source this file to activate the agent runtime.
# Usage: . '@AGENTS_HOME@/env.ps1'

$env:AGENTS_HOME = '@AGENTS_HOME@'
if ($IsWindows -or $env:OS -eq 'Windows_NT') {
    $venvBin = Join-Path $env:AGENTS_HOME 'venv\\Scripts'
} else {
    $venvBin = Join-Path $env:AGENTS_HOME 'venv/bin'
}
$sep = [IO.Path]::PathSeparator
$env:PATH = $venvBin + $sep + (Join-Path $env:AGENTS_HOME 'bin') + $sep + $env:PATH
$env:UV_PYTHON_INSTALL_DIR = Join-Path $env:AGENTS_HOME 'python'
$env:FNM_DIR = Join-Path $env:AGENTS_HOME 'fnm'

# Activate fnm-managed Node.js if fnm is available
if (Get-Command fnm -ErrorAction SilentlyContinue) {
    fnm env --shell powershell | Out-String | Invoke-Expression
}
"""


def sh_double_quoted(value: str) -> str:
    """Escape a value for use inside POSIX double quotes"""
    for char in ('\\', '"', '$', '`'):
        value = value.replace(char, '\\' + char)
    return value


def ps_single_quoted(value: str) -> str:
    """Escape a value for use inside PowerShell single quotes"""
    return value.replace("'", "''")


def atomic_write(path: Path, content: str):
    """
    Write content to path via a temp file in the same directory and a rename

    Readers see either the old file or the new one, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = None
    try:
        with tempfile.NamedTemporaryFile('w', dir=path.parent, prefix=f".{path.name}.",
                                         suffix='.tmp', delete=False, encoding='utf-8',
                                         newline='\n') as f:
            staging = Path(f.name)
            f.write(content)
        os.replace(staging, path)
    except Exception:
        if staging is not None:
            staging.unlink(missing_ok=True)
        raise


class EnvironmentMaterializer:
    """Renders and writes the activation files for one install root"""

    def __init__(self, root: InstallRoot):
        self.root = root

    def render_sh(self) -> str:
        return ENV_SH_TEMPLATE.replace(_PLACEHOLDER, sh_double_quoted(str(self.root.path)))

    def render_ps1(self) -> str:
        return ENV_PS1_TEMPLATE.replace(_PLACEHOLDER, ps_single_quoted(str(self.root.path)))

    def sh_source_line(self) -> str:
        return f'. "{sh_double_quoted(str(self.root.env_sh))}"'

    def ps1_source_line(self) -> str:
        return f". '{ps_single_quoted(str(self.root.env_ps1))}'"

    def write(self) -> List[Path]:
        """
        Write env.sh and env.ps1, replacing any previous copies

        Returns:
            Paths written
        """
        written = []
        for path, content in ((self.root.env_sh, self.render_sh()),
                              (self.root.env_ps1, self.render_ps1())):
            atomic_write(path, content)
            ok(f"Generated {path}")
            written.append(path)
        return written
