"""Result types for import runs."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class ImportResult:
    """
    Overall result of an import call.

    Attributes:
        success: False only when the import failed before processing rows
        created: Number of terms created
        skipped: Rows skipped for a blank name or an already existing term
        errors: Rows whose creation the term store refused
        message: Failure reason, or on success why reading stopped early
        rows_processed: Non-blank data rows seen
        duration_seconds: Wall-clock duration of the call
    """

    success: bool
    created: int = 0
    skipped: int = 0
    errors: int = 0
    message: str | None = None
    rows_processed: int = 0
    duration_seconds: float = 0.0

    @classmethod
    def failure(cls, message: str) -> "ImportResult":
        """
        Build the result of an import that failed up front.

        Args:
            message: Human-readable failure reason

        Returns:
            ImportResult with success=False
        """
        return cls(success=False, message=message)

    def as_dict(self) -> dict[str, Any]:
        """
        Return the caller-facing shape of the result.

        Returns:
            ``{success, created, skipped, errors}`` on success,
            ``{success, message}`` on failure.
        """
        if not self.success:
            return {"success": False, "message": self.message}
        data = asdict(self)
        return {k: data[k] for k in ("success", "created", "skipped", "errors")}

    def summary(self) -> str:
        """
        Get a human-readable summary.

        Returns:
            str: Counter line on success, failure reason otherwise.
        """
        if not self.success:
            return f"Import failed: {self.message}"
        return f"Created: {self.created} | Skipped: {self.skipped} | Errors: {self.errors}"
