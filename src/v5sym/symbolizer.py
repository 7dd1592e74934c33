# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Symbolization orchestration over code object locators and readers."""

import concurrent.futures
import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from v5sym.address import format_address, parse_address
from v5sym.locator import CodeObjectLocator, LocatorError, LocatorInapplicableError
from v5sym.model import ResolvedSymbol
from v5sym.process import ResolutionCancelledError
from v5sym.reader import CodeObjectReader, ReaderError

logger = logging.getLogger(__name__)

_LOCK_POLL_SECONDS: float = 0.1


class SymbolizationError(RuntimeError):
    """Represent a terminal failure to symbolize an address."""


class NoCandidatesFoundError(SymbolizationError):
    """Represent a project in which no locator found code objects."""

    def __init__(self, errors: list["LocatorAttempt"]) -> None:
        super().__init__("Cannot find any code objects in this project")
        self.errors = errors


class AllReadersUnavailableError(SymbolizationError):
    """Represent a host on which no configured reader works."""

    def __init__(self, reader_names: list[str]) -> None:
        super().__init__(
            "Cannot find any working code object readers; install one of: "
            + ", ".join(reader_names)
        )
        self.reader_names = reader_names


class AllCandidatesFailedError(SymbolizationError):
    """Represent an address that no code object could resolve."""

    def __init__(self, errors: list["CandidateFailure"]) -> None:
        super().__init__("This address could not be resolved to a line")
        self.errors = errors


@dataclass(frozen=True)
class LocatorAttempt:
    """Represent a locator that did not produce code objects."""

    locator_name: str
    error: LocatorError | OSError


@dataclass(frozen=True)
class CandidateFailure:
    """Represent a reader failure for one candidate code object."""

    code_object: Path
    error: ReaderError


class Symbolizer:
    """Resolve addresses by searching for code objects and reading their metadata."""

    def __init__(
        self,
        locators: list[CodeObjectLocator],
        readers: list[CodeObjectReader],
    ) -> None:
        """Initialize symbolizer.

        Args:
            locators: Code object locators, highest priority first.
            readers: Code object readers, highest priority first.
        """
        self.locators = list(locators)
        self.readers = list(readers)
        self._working_reader: CodeObjectReader | None = None
        self._reader_lock = threading.Lock()

    def get_working_reader(
        self, cancel: threading.Event | None = None
    ) -> CodeObjectReader | None:
        """Get the first working reader, re-checking a cached one.

        Args:
            cancel: Optional cancellation signal.

        Returns:
            The reader, or ``None`` if no reader works.

        Raises:
            ResolutionCancelledError: If ``cancel`` is set while waiting or probing.
        """
        while not self._reader_lock.acquire(timeout=_LOCK_POLL_SECONDS):
            _check_cancelled(cancel)
        try:
            cached = self._working_reader
            if cached is not None:
                if self._probe(cached, cancel):
                    return cached
                logger.warning(
                    f"The current code object reader has stopped working (reader={cached.name})"
                )
                self._working_reader = None

            logger.info("Trying to find a working code object reader")
            for reader in self.readers:
                if self._probe(reader, cancel):
                    logger.info(f"Using code object reader (reader={reader!r})")
                    self._working_reader = reader
                    return reader
                logger.debug(
                    f"Code object reader is not working (reader={reader.name})"
                )
            return None
        finally:
            self._reader_lock.release()

    def _probe(
        self, reader: CodeObjectReader, cancel: threading.Event | None
    ) -> bool:
        """Run one reader health check; failures other than cancellation count as unhealthy."""
        try:
            return reader.is_healthy(cancel=cancel)
        except ResolutionCancelledError:
            raise
        except Exception as exc:
            logger.debug(
                f"Code object reader health check raised (reader={reader.name} error={exc})"
            )
            return False

    def find_code_objects(
        self, project_root: Path, cancel: threading.Event | None = None
    ) -> list[Path]:
        """Ask locators in priority order for code objects.

        Args:
            project_root: Project directory to search in.
            cancel: Optional cancellation signal.

        Returns:
            Code objects of the first locator that found any, in its order.

        Raises:
            NoCandidatesFoundError: If no locator found a code object.
            ResolutionCancelledError: If ``cancel`` is set.
        """
        attempts: list[LocatorAttempt] = []
        for locator in self.locators:
            _check_cancelled(cancel)
            logger.info(f"Looking for code objects (locator={locator.name})")
            try:
                found = locator.find_code_objects(project_root)
            except LocatorInapplicableError as exc:
                logger.info(
                    f"Locator does not apply (locator={locator.name} reason={exc})"
                )
                attempts.append(LocatorAttempt(locator_name=locator.name, error=exc))
                continue
            except (LocatorError, OSError) as exc:
                logger.warning(f"Locator failed (locator={locator.name} error={exc})")
                attempts.append(LocatorAttempt(locator_name=locator.name, error=exc))
                continue
            logger.info(f"Locator finished (locator={locator.name} found={len(found)})")
            if found:
                return list(found)

        raise NoCandidatesFoundError(attempts)

    def resolve(
        self,
        address: str | int,
        project_root: Path,
        cancel: threading.Event | None = None,
    ) -> ResolvedSymbol:
        """Resolve an address to a symbol and, when possible, a source location.

        Args:
            address: Address as hexadecimal text or integer.
            project_root: Project directory to search for code objects in.
            cancel: Optional cancellation signal.

        Returns:
            The first result with a source location, otherwise the best
            location-less result.

        Raises:
            InvalidAddressError: If the address is not hexadecimal.
            NoCandidatesFoundError: If no code objects were found.
            AllReadersUnavailableError: If no reader works.
            AllCandidatesFailedError: If every code object failed to resolve.
            ResolutionCancelledError: If ``cancel`` is set.
        """
        address_text = format_address(parse_address(address))
        logger.info(
            f"Symbolizing address (address={address_text} project_root={project_root})"
        )

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            reader_request = executor.submit(self.get_working_reader, cancel)
            code_objects = self.find_code_objects(project_root, cancel=cancel)
            for index, code_object in enumerate(code_objects, start=1):
                logger.info(f"Candidate code object (rank={index} path={code_object})")
            reader = reader_request.result()

        _check_cancelled(cancel)
        if reader is None:
            raise AllReadersUnavailableError(
                [configured.name for configured in self.readers]
            )

        failures: list[CandidateFailure] = []
        resolved: ResolvedSymbol | None = None
        for code_object in code_objects:
            _check_cancelled(cancel)
            logger.info(
                f"Resolving in code object (path={code_object} reader={reader.name})"
            )
            try:
                result = reader.resolve(address_text, code_object, cancel=cancel)
            except ReaderError as exc:
                logger.warning(
                    f"Code object could not be resolved (path={code_object} error={exc})"
                )
                failures.append(CandidateFailure(code_object=code_object, error=exc))
                continue

            logger.info(f"Resolved (result={result!r})")
            if result.has_location:
                return result
            logger.info(
                "Result has no source location; checking remaining code objects "
                f"(path={code_object})"
            )
            if resolved is None:
                resolved = result

        if resolved is None:
            raise AllCandidatesFailedError(failures)
        return resolved


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ResolutionCancelledError("Resolution was cancelled")
