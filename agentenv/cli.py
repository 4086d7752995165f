#!/usr/bin/env python3
"""
agent-environment CLI - Command-line interface
Click-based entry point for install / uninstall and friends
"""

import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from agentenv import __version__
from agentenv.config import AgentEnvConfig, ConfigManager
from agentenv.console import error, set_verbose
from agentenv.errors import AgentEnvError
from agentenv.layout import InstallRoot

# Force UTF-8 on Windows consoles that default to cp1252
if sys.platform == 'win32':
    import io
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
    if isinstance(sys.stderr, io.TextIOWrapper):
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')


def _load_config(config_path: Optional[str], **overrides) -> AgentEnvConfig:
    home = overrides.get('home')
    config = ConfigManager.load_config(
        Path(config_path) if config_path else None,
        home=Path(home) if home else None,
    )
    return config.with_overrides(**overrides)


def _fail(exc: AgentEnvError):
    error(str(exc))
    sys.exit(1)


config_option = click.option(
    '--config', 'config_path', type=click.Path(dir_okay=False), default=None,
    help='Config file (default: $AGENTS_CONFIG or <home>/config.yml)',
)
home_option = click.option(
    '--home', type=click.Path(file_okay=False), default=None,
    help='Install root (default: $AGENTS_HOME or ~/.agents)',
)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version and exit')
@click.option('-v', '--verbose', is_flag=True, help='Show debug output')
@click.pass_context
def main(ctx, version, verbose):
    """
    agent-environment - self-contained agent toolchain

    Installs uv, Python, fnm and Node.js into one per-user directory
    without touching system tooling.

    Examples:
        agentenv install              # Install or repair everything
        agentenv uninstall            # Remove what install created
        agentenv platform             # Show the detected platform
    """
    set_verbose(verbose)

    if version:
        click.echo(f"agent-environment v{__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@home_option
@config_option
@click.option('--uv-version', default=None, help="uv release to download (default: latest)")
@click.option('--python-version', default=None, help='Python version to install (default: 3.12)')
@click.option('--fnm-version', default=None, help='fnm release to download (default: latest)')
@click.option('--node-version', default=None, help='Node.js major version (default: 20)')
@click.option('--no-modify-profile', is_flag=True, help='Do not touch shell profile files')
def install(home, config_path, uv_version, python_version, fnm_version, node_version, no_modify_profile):
    """
    Install (or converge) the agent toolchain.

    Re-running is safe: every step is skipped when already satisfied.
    """
    from agentenv.bootstrap import Bootstrapper

    try:
        config = _load_config(
            config_path,
            home=home,
            uv_version=uv_version,
            python_version=python_version,
            fnm_version=fnm_version,
            node_version=node_version,
            patch_profile=False if no_modify_profile else None,
        )
        Bootstrapper(config).run()
    except AgentEnvError as e:
        _fail(e)


@main.command()
@home_option
@config_option
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
def uninstall(home, config_path, yes):
    """
    Remove tools installed by `agentenv install`.

    Only entries the installer creates are deleted; anything else in the
    install root is left alone.
    """
    from agentenv.platform.detector import detect_shell, get_platform
    from agentenv.console import blank, info, ok
    from agentenv.uninstall import Uninstaller

    try:
        config = _load_config(config_path, home=home)
        root = InstallRoot.at(config.home)

        if not yes:
            click.confirm(f"Remove agent-environment from {root}?", abort=True, err=True)

        platform_id = get_platform()
        blank()
        info("agent-environment uninstaller")
        info(f"AGENTS_HOME: {root}")
        blank()

        Uninstaller(root, platform_id, detect_shell(platform_id)).run()
        blank()
        ok("Uninstall complete. Restart your terminal to apply changes.")
    except AgentEnvError as e:
        _fail(e)


@main.command(name='platform')
def platform_cmd():
    """Show the detected platform and shell."""
    from agentenv.platform.detector import detect_shell, get_platform

    try:
        platform_id = get_platform()
    except AgentEnvError as e:
        _fail(e)
    click.echo(f"platform: {platform_id}")
    click.echo(f"shell: {detect_shell(platform_id)}")


@main.command()
@home_option
@config_option
@click.option('--shell', 'shell', type=click.Choice(['sh', 'powershell']), default=None,
              help='Activation file flavour (default: by platform)')
def env(home, config_path, shell):
    """
    Print the activation file path.

    Example:
        . "$(agentenv env)"
    """
    from agentenv.platform.detector import get_platform

    try:
        config = _load_config(config_path, home=home)
        if shell is None:
            shell = 'powershell' if get_platform().is_windows else 'sh'
    except AgentEnvError as e:
        _fail(e)

    root = InstallRoot.at(config.home)
    path = root.env_ps1 if shell == 'powershell' else root.env_sh
    if not path.is_file():
        error(f"{path} does not exist yet; run `agentenv install` first")
        sys.exit(1)
    click.echo(str(path))


@main.command()
@home_option
@config_option
@click.option('--write', is_flag=True, help='Save the effective config to <home>/config.yml')
def config(home, config_path, write):
    """Show the effective configuration."""
    from agentenv.console import ok

    try:
        effective = _load_config(config_path, home=home)
    except AgentEnvError as e:
        _fail(e)

    if write:
        path = ConfigManager.save_config(effective, InstallRoot.at(effective.home).config_file)
        ok(f"Saved {path}")
        return

    click.echo(yaml.dump(effective.to_dict(), default_flow_style=False, sort_keys=False, indent=2), nl=False)


if __name__ == '__main__':
    main()
