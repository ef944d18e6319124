"""Result models for filesystem operations.

Best-effort operations never raise; they describe their outcome with
these frozen dataclasses so callers may inspect it when they care.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of a single filesystem operation.

    Attributes:
        path: Path that was operated on.
        success: Whether the operation reached its goal.
        error: Error message if the operation failed, None otherwise.
        skipped: True when the operation intentionally did nothing
            (excluded file, existing marker, markers disabled).
    """

    path: str
    success: bool
    error: str | None = None
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class DirectoryResult:
    """Result of ensuring a directory exists and is writable.

    Attributes:
        path: Directory path.
        created: Whether the directory was created by this call.
        writable: Whether the directory is writable afterwards.
        marker: Result of writing the access-deny marker, None if not requested.
        error: Creation error message, if any.
    """

    path: str
    created: bool
    writable: bool
    marker: ActionResult | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """The directory exists and can be written to."""
        return self.writable


@dataclass(frozen=True, slots=True)
class DeleteResult:
    """Result of a recursive delete.

    Attributes:
        path: Root directory of the delete.
        removed: Paths removed, in removal order.
        failed: Paths that could not be removed.
        error: Message when the root could not be enumerated at all.
    """

    path: str
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        """Everything that was attempted got removed."""
        return self.error is None and not self.failed
