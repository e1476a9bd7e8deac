"""
Logger utility for the Banker's Algorithm Allocator.

Console output with an optional log file and verbosity levels.
"""

from typing import Optional
from datetime import datetime

from models.outcome import RequestOutcome
from utils.formatter import describe_outcome, format_sequence


class AllocatorLogger:
    """
    Logger for allocator decisions.

    Format: "P1 requests [1, 0, 2] - GRANTED (safe sequence: P1 -> P3 -> ...)"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None, stream=None):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose output
            log_file: Optional file path for logging
            stream: Optional file-like object for console output (defaults to stdout)
        """
        self.verbose = verbose
        self.log_file = log_file
        self.stream = stream
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Allocator Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        # Console output
        print(formatted, file=self.stream)

        # File output
        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_request(self, outcome: RequestOutcome) -> None:
        """
        Log the decision on a resource request (debug level).

        Args:
            outcome: Result of the request evaluation
        """
        status = outcome.kind.name.replace("_", " ")
        message = (
            f"P{outcome.pid} requests {format_sequence(outcome.request)} - "
            f"{status} ({describe_outcome(outcome)})"
        )
        self.log(message, "debug")

    def log_safety(self, is_safe: bool, sequence) -> None:
        """Log the result of a safety check (debug level)."""
        if is_safe:
            self.log(f"Safety check: SAFE, sequence {format_sequence(sequence)}", "debug")
        else:
            self.log("Safety check: UNSAFE", "debug")

    def log_state(self, state_str: str) -> None:
        """
        Log a formatted state snapshot.

        Args:
            state_str: Formatted allocation state
        """
        self.log(state_str)

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
