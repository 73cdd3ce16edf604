"""
Runs external binaries and captures their combined output.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from melody_fetcher.exceptions import ResolverNotFoundError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit code plus everything the process wrote to stdout and stderr."""

    exit_code: int
    output: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """
    Spawns a binary with an argument vector and waits for it to exit.

    A non-zero exit code is returned like any other result. Only a failure to
    start the process at all raises.
    """

    async def run(self, binary: str, args: Sequence[str]) -> CommandResult:
        try:
            process = await asyncio.create_subprocess_exec(
                binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise ResolverNotFoundError(f"Could not start '{binary}': {e}") from e

        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        log.debug(f"'{binary}' exited with code {process.returncode}")
        return CommandResult(exit_code=process.returncode, output=output)
