"""Base class for frame sinks."""

from abc import ABC, abstractmethod


class OutputSink(ABC):
    """Abstract base class for consumers of captured frames."""

    def __init__(self, path: str = ""):
        """
        Initialize the sink with an output file path.

        Args:
            path: Path to the output file
        """
        self.path = path
        self.frames_written = 0

    @abstractmethod
    async def start(self) -> None:
        """Prepare to receive frames."""
        raise NotImplementedError

    @abstractmethod
    async def write(self, frame: bytes) -> None:
        """
        Accept the next frame, in timeline order.

        Args:
            frame: Encoded still image
        """
        raise NotImplementedError

    @abstractmethod
    async def finish(self) -> int | None:
        """
        Signal end of input and wait for the output to be finalized.

        Returns:
            Exit status of the underlying encoder, if there is one
        """
        raise NotImplementedError
