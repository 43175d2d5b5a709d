"""
Base connection class for TaguchiMail connections.

This module defines the abstract base class that connection contexts
implement, giving them a consistent connect/disconnect lifecycle.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)


class BaseConnection(ABC):
    """
    Abstract base class for TaguchiMail connections.

    Attributes:
        _client: The underlying HTTP client instance
        _is_connected: Flag indicating connection status
    """

    def __init__(self) -> None:
        """Initialize the base connection."""
        self._client: Optional[Any] = None
        self._is_connected: bool = False
        logger.debug(f"Initialized {self.__class__.__name__}")

    @abstractmethod
    def connect(self) -> None:
        """
        Establish connection to the service.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection and release transport resources."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if the connection is healthy and functional.

        Returns:
            True if the connection is healthy, False otherwise
        """
        pass

    def is_connected(self) -> bool:
        """
        Check if currently connected to the service.

        Returns:
            True if connected, False otherwise
        """
        return self._is_connected

    def __enter__(self) -> "BaseConnection":
        """
        Context manager entry.

        Examples:
            >>> with Context("tm.example.org", "user", "secret", "1") as ctx:
            ...     subscriber = Subscriber.get(ctx, "42")
        """
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()

    def __repr__(self) -> str:
        status = "connected" if self._is_connected else "disconnected"
        return f"<{self.__class__.__name__} status={status}>"
