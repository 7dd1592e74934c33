# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Subprocess helper shared by debug-info tool readers."""

import logging
import subprocess
import threading
from dataclasses import dataclass

from v5sym.reader import ReaderProcessError, ReaderUnavailableError

logger = logging.getLogger(__name__)

_CANCEL_POLL_SECONDS: float = 0.1


class ResolutionCancelledError(RuntimeError):
    """Represent a resolution aborted by the caller's cancellation signal."""


@dataclass(frozen=True)
class ToolExecutable:
    """Run one external executable and capture its output.

    Attributes:
        executable: Executable name (looked up on ``PATH``) or path.
    """

    executable: str

    def is_working(self, cancel: threading.Event | None = None) -> bool:
        """Check whether the executable can be spawned.

        Args:
            cancel: Optional signal; when set the version check is killed.

        Returns:
            ``True`` when ``<executable> --version`` exits successfully.

        Raises:
            ResolutionCancelledError: If ``cancel`` is set before the check ends.
        """
        _raise_if_cancelled(cancel)
        try:
            proc = subprocess.Popen(
                [self.executable, "--version"],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as exc:
            logger.debug(
                f"Executable could not be started (executable={self.executable} error={exc})"
            )
            return False
        self._communicate(proc, cancel)
        if proc.returncode != 0:
            logger.debug(
                f"Executable version check failed (executable={self.executable} "
                f"returncode={proc.returncode})"
            )
            return False
        return True

    def run(self, args: list[str], cancel: threading.Event | None = None) -> str:
        """Run the executable and return its standard output.

        Args:
            args: Command line arguments, without the executable.
            cancel: Optional signal; when set the process is killed.

        Returns:
            Captured standard output.

        Raises:
            ReaderUnavailableError: If the process cannot be started.
            ReaderProcessError: If the process exits with a non-zero code.
            ResolutionCancelledError: If ``cancel`` is set before the process exits.
        """
        cmd = [self.executable, *args]
        logger.info(f"Running tool (cmd={' '.join(cmd)})")
        _raise_if_cancelled(cancel)
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as exc:
            logger.warning(
                f"Tool could not be started (executable={self.executable} error={exc})"
            )
            raise ReaderUnavailableError(
                f"Cannot run {self.executable}: {exc}"
            ) from exc

        stdout, stderr = self._communicate(proc, cancel)
        if proc.returncode != 0:
            logger.warning(
                f"Tool exited with an error (executable={self.executable} "
                f"returncode={proc.returncode} stderr={stderr.strip()})"
            )
            raise ReaderProcessError(
                f"{self.executable} exited with code {proc.returncode}: {stderr.strip()}"
            )
        return stdout

    def _communicate(
        self, proc: subprocess.Popen[str], cancel: threading.Event | None
    ) -> tuple[str, str]:
        if cancel is None:
            return proc.communicate()
        while True:
            try:
                return proc.communicate(timeout=_CANCEL_POLL_SECONDS)
            except subprocess.TimeoutExpired:
                if not cancel.is_set():
                    continue
                proc.kill()
                proc.communicate()
                logger.info(f"Tool run cancelled (executable={self.executable})")
                raise ResolutionCancelledError("Resolution was cancelled") from None


def _raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ResolutionCancelledError("Resolution was cancelled")
