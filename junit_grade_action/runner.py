"""Run the external setup, build and test commands."""

import asyncio
import logging
import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass

log = logging.getLogger(__name__)

# Variables forwarded from the action environment to child processes.
FORWARDED_VARIABLES = ("PATH", "HOME", "JAVA_HOME")


class ExternalToolUnavailableError(Exception):
    """Raised when a command cannot be started or does not finish in time."""


@dataclass(frozen=True, kw_only=True)
class CommandResult:
    """Captured result of one external command."""

    command: str
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.timed_out and self.returncode == 0


def child_environment() -> Mapping[str, str]:
    """Build the minimal environment handed to every child process."""
    env = {
        name: value
        for name in FORWARDED_VARIABLES
        if (value := os.environ.get(name)) is not None
    }
    env["FORCE_COLOR"] = "true"
    return env


async def run_setup(command: str, timeout: float) -> None:
    """Run the setup command directly, without a shell, discarding its output.

    Raises:
        ExternalToolUnavailableError: If the command cannot be started or
            does not finish within ``timeout`` seconds

    """
    log.info("Running setup command: %s", command)
    try:
        process = await asyncio.create_subprocess_exec(
            *shlex.split(command),
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            env=child_environment(),
        )
    except (OSError, ValueError) as exc:
        raise ExternalToolUnavailableError(str(exc)) from exc

    try:
        await asyncio.wait_for(process.wait(), timeout=timeout)
    except TimeoutError as exc:
        process.kill()
        await process.wait()
        raise ExternalToolUnavailableError(
            f"Setup command did not finish within {timeout:g} seconds"
        ) from exc

    log.info("Setup command exited with code %s", process.returncode)


async def _collect(stream: asyncio.StreamReader | None, buffer: bytearray) -> None:
    """Read ``stream`` into ``buffer`` until end of file."""
    if stream is None:
        return
    while chunk := await stream.read(4096):
        buffer.extend(chunk)


async def run_command(command: str, timeout: float) -> CommandResult:
    """Run a shell command and capture its output.

    A command exceeding ``timeout`` seconds is killed and reported with
    ``timed_out`` set, no exit code and whatever it printed before that.
    """
    log.info("Running: %s", command)
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=child_environment(),
    )

    stdout, stderr = bytearray(), bytearray()
    try:
        await asyncio.wait_for(
            asyncio.gather(
                _collect(process.stdout, stdout),
                _collect(process.stderr, stderr),
                process.wait(),
            ),
            timeout=timeout,
        )
    except TimeoutError:
        log.warning("Command timed out after %.0fs: %s", timeout, command)
        process.kill()
        await process.wait()
        return CommandResult(
            command=command,
            returncode=None,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            timed_out=True,
        )

    log.info("Command exited with code %d: %s", process.returncode, command)
    return CommandResult(
        command=command,
        returncode=process.returncode,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
