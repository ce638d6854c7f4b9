"""Exception hierarchy for the classification viewer.

Only boundary failures are modelled here: a malformed export or an unknown
system key. Viewer lookups never raise.
"""

from typing import Iterable, List


class ClassificationViewerError(Exception):
    """Base exception for all classification viewer errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StructureError(ClassificationViewerError):
    """Raised when the top-level system/item container cannot be located."""


class UnknownSystemError(ClassificationViewerError):
    """Raised when a system key is not one of the configured systems.

    Attributes
    ----------
    system_key
        The key that was requested.
    valid_keys
        The keys that would have been accepted.
    """

    def __init__(self, system_key: str, valid_keys: Iterable[str]) -> None:
        self.system_key = system_key
        self.valid_keys: List[str] = list(valid_keys)
        super().__init__(
            f"Unknown system key: {system_key} (valid keys: {', '.join(self.valid_keys)})"
        )
