#!/usr/bin/env python3
"""
Global installation for the Think MCP server.

Copies the launcher script into ~/cursor-claud-think-mcp and registers it in
Cursor's ~/.cursor/mcp.json under the "mcpServers" mapping.

Usage:
- think-mcp-install
- think-mcp-install --home /tmp/home --no-verify
"""

import filecmp
import json
import os
import shutil
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from think_mcp.settings import SERVER_NAME

# ============================================================================
# CONFIGURATION & CONSTANTS
# ============================================================================

TOOL_SOURCE = Path(__file__).resolve().parent / "think_tool.py"
INSTALL_DIR_NAME = "cursor-claud-think-mcp"
CURSOR_DIR_NAME = ".cursor"
MCP_CONFIG_NAME = "mcp.json"

IS_WINDOWS = sys.platform.startswith("win")


@dataclass(frozen=True)
class InstallPaths:
    cursor_config_dir: Path
    install_dir: Path
    artifact: Path
    config_file: Path

    @classmethod
    def for_home(cls, home: Path) -> "InstallPaths":
        home = Path(home).expanduser().resolve()
        cursor_config_dir = home / CURSOR_DIR_NAME
        install_dir = home / INSTALL_DIR_NAME
        return cls(
            cursor_config_dir=cursor_config_dir,
            install_dir=install_dir,
            artifact=install_dir / TOOL_SOURCE.name,
            config_file=cursor_config_dir / MCP_CONFIG_NAME,
        )


# ============================================================================
# INSTALLATION STEPS
# ============================================================================

def ensure_directory(path: Path) -> bool:
    """Create a directory if it doesn't exist. Returns True when created."""
    if path.is_dir():
        return False
    click.secho(f"Creating directory: {path}", fg="blue")
    path.mkdir(parents=True, exist_ok=True)
    return True


def copy_tool_script(paths: InstallPaths, source: Path = TOOL_SOURCE) -> bool:
    """Copy the launcher into the install directory and make it executable."""
    click.secho(f"Copying {source.name} to installation directory...", fg="blue")
    try:
        shutil.copyfile(source, paths.artifact)
        if not IS_WINDOWS:
            os.chmod(paths.artifact, 0o755)
    except OSError as e:
        click.secho(f"Error copying tool script: {e}", fg="red")
        return False

    click.secho("Tool script copied successfully!", fg="green")
    return True


def load_mcp_config(config_file: Path) -> Dict[str, Any]:
    """Read the existing config, or start a fresh one if it's missing or unusable."""
    if not config_file.exists():
        return {"mcpServers": {}}

    try:
        config = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        click.secho(f"Warning: Could not parse existing MCP config, creating new one: {e}", fg="yellow")
        return {"mcpServers": {}}

    if not isinstance(config, dict):
        click.secho("Warning: Existing MCP config is not a JSON object, creating new one", fg="yellow")
        return {"mcpServers": {}}

    click.secho("Existing MCP configuration found, updating...", fg="yellow")
    return config


def server_entry(paths: InstallPaths, command: str) -> Dict[str, Any]:
    return {
        "command": command,
        "args": [str(paths.artifact)]
    }


def configure_mcp(paths: InstallPaths, command: str) -> bool:
    """Create or update the MCP configuration file with our server entry."""
    click.secho("Configuring MCP settings...", fg="blue")

    config = load_mcp_config(paths.config_file)
    if not isinstance(config.get("mcpServers"), dict):
        config["mcpServers"] = {}
    config["mcpServers"][SERVER_NAME] = server_entry(paths, command)

    try:
        paths.config_file.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        click.secho(f"Error configuring MCP: {e}", fg="red")
        return False

    click.secho("MCP configuration updated successfully!", fg="green")
    return True


def verify_installation(paths: InstallPaths, command: str, source: Path = TOOL_SOURCE) -> List[str]:
    """Check that the artifact and config agree. Returns a list of problems."""
    problems = []

    if not paths.artifact.is_file():
        problems.append(f"Tool script missing: {paths.artifact}")
    else:
        if not filecmp.cmp(source, paths.artifact, shallow=False):
            problems.append(f"Tool script differs from {source}")
        if not IS_WINDOWS and not paths.artifact.stat().st_mode & stat.S_IXUSR:
            problems.append(f"Tool script is not executable: {paths.artifact}")

    try:
        config = json.loads(paths.config_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        problems.append(f"Could not read MCP config: {e}")
        return problems

    servers = config.get("mcpServers") if isinstance(config, dict) else None
    entry = servers.get(SERVER_NAME) if isinstance(servers, dict) else None
    if entry is None:
        problems.append(f"MCP config has no entry for {SERVER_NAME}")
    elif entry != server_entry(paths, command):
        problems.append(f"MCP config entry for {SERVER_NAME} does not point at {paths.artifact}")

    return problems


# ============================================================================
# CLI
# ============================================================================

@click.command(name="think-mcp-install")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Home directory to install into (default: current user's home).",
)
@click.option(
    "--command",
    "command",
    default=None,
    help="Interpreter Cursor should launch the server with (default: this Python).",
)
@click.option("--verify/--no-verify", default=True, show_default=True, help="Check the installation afterwards.")
def main(home: Optional[Path], command: Optional[str], verify: bool) -> None:
    """Install the Think MCP server for Cursor."""
    paths = InstallPaths.for_home(home if home is not None else Path.home())
    command = command or sys.executable

    click.secho("\nInstalling Cursor & Claude Think MCP globally...\n", fg="blue")

    try:
        ensure_directory(paths.cursor_config_dir)
        ensure_directory(paths.install_dir)
    except OSError as e:
        click.secho(f"Error creating directories: {e}", fg="red")
        sys.exit(1)

    if not copy_tool_script(paths):
        click.secho("Failed to copy tool script, aborting installation.", fg="red")
        sys.exit(1)

    if not configure_mcp(paths, command):
        click.secho("Failed to configure MCP, aborting installation.", fg="red")
        sys.exit(1)

    if verify:
        problems = verify_installation(paths, command)
        if problems:
            for problem in problems:
                click.secho(f"Verification failed: {problem}", fg="red")
            sys.exit(1)
        click.secho("Installation verified.", fg="green")

    click.secho("\nCursor & Claude Think MCP installed successfully!", fg="green")
    click.secho("\nIMPORTANT: You must restart Cursor for the changes to take effect.", fg="yellow")
    click.secho('\nUsage: In any Cursor chat, type "think" followed by your question.', fg="blue")
    click.secho("  Example: think What is the computational complexity of quicksort?", fg="blue")


if __name__ == "__main__":
    main()
