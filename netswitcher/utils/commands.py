"""
Command execution utilities for NetSwitcher.

This module provides robust command execution with error handling and logging.
It serves as the central location for all command execution to avoid duplication.
"""

import shlex
import subprocess

from ..logging_config import get_logger

# Get module logger
logger = get_logger(__name__)


def _execute(command, text=True, input=None, shell=False):
    """Run a command and return the CompletedProcess, or raise on spawn failure."""
    if shell and isinstance(command, list):
        command = shlex.join(command)

    logger.debug(f"Running command ({'shell' if shell else 'list'}): {command}")

    return subprocess.run(
        command,
        shell=shell,
        check=False,
        capture_output=True,
        text=text,
        encoding="utf-8" if text else None,
        errors="ignore" if text else None,
        input=input,
    )


def _command_name(command, shell):
    if shell or isinstance(command, str):
        return str(command).split()[0]
    return command[0]


def run_command(command, capture=False, text=True, input=None, shell=False, quiet_on_error=False):
    """
    Execute a command with robust error handling and logging.

    Args:
        command: Command to execute (list of strings or string if shell=True)
        capture: If True, return command output; if False, return success status
        text: If True, decode output as text; if False, return bytes
        input: Optional input to send to the command's stdin
        shell: If True, execute through the shell; if False, exec directly
        quiet_on_error: If True, suppress error logging for expected failures

    Returns:
        If capture=True: Command output string, or None if the command failed
        If capture=False: True on success, False on failure
    """
    try:
        result = _execute(command, text=text, input=input, shell=shell)
    except FileNotFoundError:
        logger.error(f"Command not found: {_command_name(command, shell)}")
        return None if capture else False
    except Exception as e:
        logger.error(f"Unexpected error running command '{command}': {e}")
        return None if capture else False

    if result.stderr:
        logger.debug(f"Command stderr: {result.stderr.strip()}")

    if result.returncode != 0:
        if quiet_on_error:
            logger.debug(f"Command '{command}' failed (expected)")
        else:
            logger.debug(f"Command '{command}' failed with status {result.returncode}")
        return None if capture else False

    return result.stdout.strip() if capture else True


def run_action(command, input=None):
    """
    Execute a state-changing command and report the outcome.

    Returns:
        tuple: (ok, message) where message is the command output on success
               and a human-readable failure description otherwise.
    """
    try:
        result = _execute(command, input=input)
    except FileNotFoundError:
        name = _command_name(command, False)
        logger.error(f"Command not found: {name}")
        return False, f"Command not found: {name}"
    except Exception as e:
        logger.error(f"Unexpected error running command '{command}': {e}")
        return False, str(e)

    output = ((result.stdout or "") + (result.stderr or "")).strip()
    if result.returncode != 0:
        logger.debug(f"Command '{command}' failed with status {result.returncode}: {output}")
        return False, output or f"exit status {result.returncode}"

    return True, output
