"""JSON snapshot files standing in for the persistence layer.

A snapshot file holds ``{"transactions": [...], "goals": [...]}``.
"""

from pathlib import Path

from pydantic import ValidationError

from fincoach.core.exceptions import SnapshotFormatError, SnapshotNotFoundError
from fincoach.core.models import Snapshot
from fincoach.logging_setup import get_logger

_logger = get_logger("fincoach.core.snapshot")


def load_snapshot(path: Path) -> Snapshot:
    """Read and validate a snapshot file.

    Raises:
        SnapshotNotFoundError: If the file does not exist.
        SnapshotFormatError: If the content is not a valid snapshot.
    """
    if not path.is_file():
        raise SnapshotNotFoundError(f"Snapshot not found: {path}")

    try:
        snapshot = Snapshot.model_validate_json(path.read_text(encoding="utf-8"))
    except (ValidationError, UnicodeDecodeError) as e:
        raise SnapshotFormatError(f"Invalid snapshot {path}: {e}") from e

    _logger.debug(
        "Loaded snapshot %s (%d transactions, %d goals)",
        path,
        len(snapshot.transactions),
        len(snapshot.goals),
    )
    return snapshot


def save_snapshot(snapshot: Snapshot, path: Path) -> None:
    """Write a snapshot file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
    _logger.debug("Saved snapshot %s", path)
