"""
Defines a messenger system to communicate from the backend to the console.

This module provides a protocol (`UIMessenger`) and two implementations:
- ConsoleMessenger: For command-line output using print/tqdm.
- SilentMessenger: Swallows all output, used for nested simulations.
"""

from __future__ import annotations

import threading
from typing import Protocol
from tqdm import tqdm


# 1. --- The Protocol (Interface) ---

class UIMessenger(Protocol):
    """Defines the interface for sending updates from the backend."""

    def log(self, message: str) -> None:
        """Logs a string message."""
        ...

    def start_progress(self, total: int, desc: str = "") -> None:
        """Starts/resets a progress bar with a new total and description."""
        ...

    def update_progress(self, advance: int = 1) -> None:
        """Advances the progress bar by a given amount."""
        ...

    def stop_progress(self) -> None:
        """Stops and cleans up the current progress bar."""
        ...


# 2. --- The Default Console Implementation ---
# This implementation manages a single tqdm instance.

class ConsoleMessenger:
    """A messenger that prints to the console and uses a tqdm progress bar."""
    def __init__(self):
        self.pbar: tqdm | None = None
        # Simulation workers may report from several threads
        self._lock = threading.Lock()

    def log(self, message: str) -> None:
        """
        Prints a message. If a progress bar is active, uses its `write`
        method to avoid interfering with the bar's display.
        """
        with self._lock:
            if self.pbar:
                self.pbar.write(message)
            else:
                print(message)

    def start_progress(self, total: int, desc: str = "") -> None:
        """
        Closes any existing progress bar and starts a new one.
        """
        with self._lock:
            if self.pbar:
                self.pbar.close()
            self.pbar = tqdm(total=total, desc=desc)

    def update_progress(self, advance: int = 1) -> None:
        """Updates the active progress bar, if it exists."""
        with self._lock:
            if self.pbar:
                self.pbar.update(advance)

    def stop_progress(self) -> None:
        """Closes the active progress bar, if it exists."""
        with self._lock:
            if self.pbar:
                self.pbar.close()
                self.pbar = None


# 3. --- The Silent Implementation ---

class SilentMessenger:
    """A messenger that drops every message. Used by calibration re-runs."""

    def log(self, message: str) -> None:
        pass

    def start_progress(self, total: int, desc: str = "") -> None:
        pass

    def update_progress(self, advance: int = 1) -> None:
        pass

    def stop_progress(self) -> None:
        pass
