"""
Obsidian Dev Helper Build Process.

Runs the plugin's watch-mode build command in the background and
streams its output with a ``build`` tag.
Requires Python 3.11+.
"""

import asyncio
import os
import signal
from pathlib import Path

from obsidian_dev_helper.utils.console import TaggedOutput
from obsidian_dev_helper.utils.logger import LoggerMixin

IS_POSIX = os.name == "posix"


class BuildProcess(LoggerMixin):
    """
    A shell build command running in its own process group.

    The command (usually ``npm run dev``) starts more processes of its
    own, so stopping it signals the whole group rather than the shell.
    """

    def __init__(
        self,
        command: str,
        cwd: Path | None = None,
        output: TaggedOutput | None = None,
    ) -> None:
        self._command = command
        self._cwd = cwd
        self._output = output or TaggedOutput()
        self._process: asyncio.subprocess.Process | None = None
        self._pump_task: asyncio.Task[None] | None = None

    @property
    def command(self) -> str:
        return self._command

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process is not None else None

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def start(self) -> None:
        """Start the build command."""
        if self._process is not None:
            raise RuntimeError("build process already started")

        self._process = await asyncio.create_subprocess_shell(
            self._command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=self._cwd,
            start_new_session=IS_POSIX,
        )
        self._pump_task = asyncio.create_task(self._pump_output())
        self.log.info("build_started", command=self._command, pid=self._process.pid)

    async def _pump_output(self) -> None:
        assert self._process is not None and self._process.stdout is not None
        stream = self._process.stdout
        while True:
            line = await stream.readline()
            if not line:
                break
            self._output.build(line.decode("utf-8", errors="replace").rstrip("\r\n"))

    async def wait(self) -> int:
        """
        Wait for the build command to exit.

        Returns:
            The exit code
        """
        if self._process is None:
            raise RuntimeError("build process not started")

        returncode = await self._process.wait()
        await self._drain_output()
        return returncode

    async def _drain_output(self, timeout: float = 1.0) -> None:
        # Orphaned children can keep the pipe open after the shell exits
        if self._pump_task is None or self._pump_task.done():
            return
        try:
            await asyncio.wait_for(asyncio.shield(self._pump_task), timeout)
        except asyncio.TimeoutError:
            self.log.debug("build_output_still_open", pid=self.pid)

    def _send_signal(self, sig: int) -> None:
        assert self._process is not None
        try:
            if IS_POSIX:
                os.killpg(self._process.pid, sig)
            elif sig == signal.SIGINT:
                self._process.terminate()
            else:
                self._process.kill()
        except ProcessLookupError:
            pass

    async def stop(self, timeout: float = 5.0) -> int | None:
        """
        Stop the build command.

        Sends SIGINT to the process group, waits up to timeout seconds,
        then kills the group.

        Returns:
            The exit code, or None if the process was never started
        """
        if self._process is None:
            return None

        if self._process.returncode is None:
            self.log.info("stopping_build", pid=self._process.pid)
            self._send_signal(signal.SIGINT)
            try:
                await asyncio.wait_for(self._process.wait(), timeout)
            except asyncio.TimeoutError:
                self.log.warning("build_stop_timeout", pid=self._process.pid, timeout=timeout)
                self._send_signal(signal.SIGKILL if IS_POSIX else signal.SIGTERM)
                await self._process.wait()

        # Children may still hold the pipe open after the shell exits
        if IS_POSIX:
            try:
                os.killpg(self._process.pid, signal.SIGKILL)
            except (ProcessLookupError, PermissionError):
                pass

        await self._drain_output()
        if self._pump_task is not None and not self._pump_task.done():
            self._pump_task.cancel()
            try:
                await self._pump_task
            except asyncio.CancelledError:
                pass

        return self._process.returncode
