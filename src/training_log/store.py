"""Reading and writing training-log JSON documents."""

import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from .exceptions import DataFileError
from .models.profile import TrainingLog

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_training_log(path: PathLike) -> TrainingLog:
    """
    Load a training-log document.

    Args:
        path: JSON file with sessions, seasons, profile, goals and courses

    Returns:
        Parsed TrainingLog

    Raises:
        DataFileError: If the file is missing, unreadable or not a valid document
    """
    path = Path(path)
    if not path.exists():
        raise DataFileError(f"Training log not found: {path}", path=str(path))

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataFileError(f"Could not read training log: {e}", path=str(path)) from e

    try:
        log = TrainingLog.model_validate_json(raw)
    except PydanticValidationError as e:
        raise DataFileError(
            "Training log is not a valid document",
            path=str(path),
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    logger.info(f"Loaded {len(log.sessions)} sessions from {path}")
    return log


def save_training_log(path: PathLike, log: TrainingLog) -> None:
    """Write a training-log document with camelCase keys."""
    path = Path(path)
    try:
        path.write_text(log.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    except OSError as e:
        raise DataFileError(f"Could not write training log: {e}", path=str(path)) from e
    logger.info(f"Saved {len(log.sessions)} sessions to {path}")
