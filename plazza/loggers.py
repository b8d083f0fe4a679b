"""Loggers writing to the console, to a file, or to both."""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod


class LoggerError(Exception):
    """Raised when a logger cannot be set up."""


class Logger(ABC):
    """Common interface of all loggers."""

    @abstractmethod
    def log(self, message: str) -> None:
        """Write a plain message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Write an error message."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Write a warning message."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Write an informational message."""


class ConsoleLogger(Logger):
    """Writes plain and info messages to stdout, the others to stderr."""

    def log(self, message: str) -> None:
        print(message, file=sys.stdout, flush=True)

    def error(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr, flush=True)

    def warning(self, message: str) -> None:
        print(f"Warning: {message}", file=sys.stderr, flush=True)

    def info(self, message: str) -> None:
        print(f"Info: {message}", file=sys.stdout, flush=True)


class FileLogger(Logger):
    """Appends tagged messages to a file, which is truncated on creation."""

    def __init__(self, filename: str) -> None:
        self.filename = str(filename)
        self._lock = threading.Lock()
        try:
            with open(self.filename, "w", encoding="utf-8") as file:
                file.write("=== Log started ===\n")
        except OSError as exc:
            raise LoggerError(f"Failed to open log file: {self.filename}") from exc

    def _append(self, tag: str, message: str) -> None:
        with self._lock:
            try:
                with open(self.filename, "a", encoding="utf-8") as file:
                    file.write(f"[{tag}] {message}\n")
            except OSError:
                pass

    def log(self, message: str) -> None:
        self._append("LOG", message)

    def error(self, message: str) -> None:
        self._append("ERROR", message)

    def warning(self, message: str) -> None:
        self._append("WARNING", message)

    def info(self, message: str) -> None:
        self._append("INFO", message)


class DefaultLogger(Logger):
    """Writes tagged messages to the console and to a log file."""

    def __init__(self, filename: str = "plazza.log") -> None:
        self._file = FileLogger(filename)

    @property
    def filename(self) -> str:
        return self._file.filename

    def info(self, message: str) -> None:
        print(f"[INFO] {message}", file=sys.stdout, flush=True)
        self._file.info(message)

    def warning(self, message: str) -> None:
        print(f"[WARNING] {message}", file=sys.stdout, flush=True)
        self._file.warning(message)

    def error(self, message: str) -> None:
        print(f"[ERROR] {message}", file=sys.stderr, flush=True)
        self._file.error(message)

    def log(self, message: str) -> None:
        print(f"[LOG] {message}", file=sys.stdout, flush=True)
        self._file.log(message)