"""ActionRunner interface - all terminal I/O goes here."""

import os
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO


class ActionRunner(ABC):
    """Interface for user-facing side effects."""

    @abstractmethod
    def display(self, message: str) -> None:
        """Display a message to the user.

        Args:
            message: Text to display (may contain newlines)
        """
        pass

    @abstractmethod
    def get_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Get input from user.

        Args:
            prompt: Question to ask user
            default: Default value if user presses Enter (shown in [brackets])

        Returns:
            User's input string (or default if empty)
        """
        pass


class RealActionRunner(ActionRunner):
    """Real implementation - talks to stdin and a text stream (stdout by default)."""

    def __init__(self, verbose: bool = False, stream: Optional[TextIO] = None):
        """Initialize with optional verbose mode.

        Args:
            verbose: If True, echo the raw input back
            stream: Where messages and prompts go (default: sys.stdout).
                    Pass sys.stderr to keep stdout free for machine output.
        """
        self.verbose = verbose
        if os.environ.get('WIZARD_VERBOSE'):
            self.verbose = True
        self.stream = stream

    @property
    def out(self) -> TextIO:
        return self.stream or sys.stdout

    def display(self, message: str) -> None:
        """Print message to the output stream."""
        print(message, file=self.out)

    def get_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Read from stdin with optional default."""
        if default:
            print(f"{prompt} [{default}]: ", end='', file=self.out, flush=True)
        else:
            print(f"{prompt}: ", end='', file=self.out, flush=True)
        response = input().strip()
        print(file=self.out)  # Add newline after user input

        if self.verbose:
            print(f"  (received: {response!r})", file=self.out)

        return response or (default or '')


class MockActionRunner(ActionRunner):
    """Mock for testing - records calls."""

    def __init__(self, inputs: Optional[List[str]] = None):
        self.calls = []
        self.input_queue = list(inputs or [])  # Pre-scripted user inputs for testing

    def display(self, message: str) -> None:
        """Capture display call for test verification."""
        self.calls.append(('display', message))

    def get_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Return next value from input_queue."""
        self.calls.append(('get_input', prompt, default))

        if self.input_queue:
            response = self.input_queue.pop(0)
            # Match RealActionRunner: apply default if response is empty
            return response if response else (default or '')

        if default:
            return default
        # Script exhausted: behave like input() at end of stream
        raise EOFError("MockActionRunner input queue is empty")

    @property
    def displayed(self) -> List[str]:
        """All messages passed to display(), in order."""
        return [call[1] for call in self.calls if call[0] == 'display']
