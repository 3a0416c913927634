"""Error types and error reporting for WebJar Extractor."""

import zipfile
from pathlib import Path
from typing import Optional, Union

import duckdb
from rich.console import Console
from rich.markup import escape


class WebJarExtractorError(Exception):
    """Base class for all extractor errors."""


class NotFoundError(WebJarExtractorError):
    """No search root exposes the requested package."""

    def __init__(self, package_name: str):
        self.package_name = package_name
        super().__init__(f"WebJar not found: {package_name}")


class InvalidPathError(WebJarExtractorError):
    """An archive path reached the path mapper without the expected prefix."""

    def __init__(self, path: str, prefix: str):
        self.path = path
        self.prefix = prefix
        super().__init__(f"Path {path!r} is not under prefix {prefix!r}")


class IOFailure(WebJarExtractorError):
    """Reading an archive entry or writing a destination file failed."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        message = f"I/O failure on {self.path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


def create_user_friendly_error(error: BaseException) -> str:
    """Convert an exception to a short message suitable for the CLI.

    Args:
        error: Exception raised by a command

    Returns:
        One-line description of the problem
    """
    if isinstance(error, NotFoundError):
        return (
            f"No WebJar named '{error.package_name}' was found in the search roots"
        )
    if isinstance(error, IOFailure):
        if isinstance(error.cause, PermissionError):
            return f"Permission denied: {error.path}"
        if isinstance(error.cause, zipfile.BadZipFile):
            return f"Corrupt archive: {error.path}"
        return f"Could not read or write {error.path}"
    if isinstance(error, InvalidPathError):
        return f"Internal error: unexpected archive path {error.path}"
    if isinstance(error, duckdb.Error):
        return f"Cache database error: {error}"
    if isinstance(error, PermissionError):
        return f"Permission denied: {error.filename or error}"
    if isinstance(error, FileNotFoundError):
        return f"File not found: {error.filename or error}"
    if isinstance(error, ValueError):
        return str(error)
    return f"Unexpected error: {error}"


class ErrorHandler:
    """Prints errors to the console and decides the exit status."""

    def __init__(self, verbose: bool = False, console: Optional[Console] = None):
        """Initialize error handler.

        Args:
            verbose: Print exception details and cause chain
            console: Console to print to (default: stderr console)
        """
        self.verbose = verbose
        self.console = console or Console(stderr=True)

    def handle(self, error: BaseException, action: str) -> int:
        """Report an error raised while performing an action.

        Args:
            error: The exception
            action: What was being done, e.g. "extracting jquery"

        Returns:
            Process exit status
        """
        self.console.print(
            f"[bold red]Error {action}:[/bold red] {escape(create_user_friendly_error(error))}"
        )
        if self.verbose:
            self.console.print(f"[dim]Details: {escape(repr(error))}[/dim]")
            cause = error.__cause__
            while cause is not None:
                self.console.print(f"[dim]Caused by: {escape(repr(cause))}[/dim]")
                cause = cause.__cause__
        return 1
