"""
PTCGP output generator to write out contents to file & accessory methods
"""

import json
import logging
import os
import pathlib
import shutil
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from . import constants
from .exceptions import ExportValidationError
from .models import Card, SetInfo, to_json

LOGGER = logging.getLogger(__name__)


class ExportPaths(NamedTuple):
    """Final locations of a published export"""

    cards_out_path: pathlib.Path
    sets_out_path: pathlib.Path


def serialize_records(records: Sequence[Union[BaseModel, Dict[str, Any]]]) -> str:
    """
    Dump records as a pretty printed JSON array
    :param records: Models or plain dicts
    :return: JSON text ending in a newline
    """
    contents = [to_json(record) if isinstance(record, BaseModel) else record for record in records]
    return json.dumps(contents, indent=constants.JSON_INDENT, ensure_ascii=False) + "\n"


def write_data(
    cards: Sequence[Union[Card, Dict[str, Any]]],
    sets: Sequence[Union[SetInfo, Dict[str, Any]]],
    data_dir: Optional[Union[str, pathlib.Path]] = None,
) -> ExportPaths:
    """
    Write card and set data into JSON files within the given directory.
    Both files are staged next to their final names and only moved into
    place once both are fully written. On failure the previous files are
    left exactly as they were.
    :param cards: Cards to write
    :param sets: Sets to write
    :param data_dir: Output directory for the JSON files
    :return: Paths of the written files for further processing
    """
    data_dir = pathlib.Path(data_dir) if data_dir else constants.DEFAULT_OUTPUT_PATH
    data_dir.mkdir(parents=True, exist_ok=True)

    paths = ExportPaths(
        cards_out_path=data_dir.joinpath(constants.CARDS_FILE_NAME),
        sets_out_path=data_dir.joinpath(constants.SETS_FILE_NAME),
    )
    staged: List[Tuple[pathlib.Path, pathlib.Path]] = []
    backups: Dict[pathlib.Path, Optional[pathlib.Path]] = {}
    published: List[pathlib.Path] = []

    try:
        for final_path, records in ((paths.cards_out_path, cards), (paths.sets_out_path, sets)):
            temp_path = _sibling(final_path, constants.TEMP_FILE_SUFFIX)
            staged.append((final_path, temp_path))
            _write_json(temp_path, serialize_records(records))

        for final_path, _ in staged:
            backups[final_path] = _backup(final_path)

        for final_path, temp_path in staged:
            os.replace(temp_path, final_path)
            published.append(final_path)
    except BaseException:
        LOGGER.error(f"Unable to publish export to {data_dir}, restoring previous files")
        for _, temp_path in staged:
            _remove_quietly(temp_path)
        for final_path in published:
            _restore(final_path, backups.get(final_path))
        raise
    finally:
        for backup_path in backups.values():
            if backup_path is not None:
                _remove_quietly(backup_path)

    LOGGER.info(f"Wrote {len(cards)} cards to {paths.cards_out_path}")
    LOGGER.info(f"Wrote {len(sets)} sets to {paths.sets_out_path}")
    return paths


def _sibling(file_path: pathlib.Path, suffix: str) -> pathlib.Path:
    return file_path.with_name(file_path.name + suffix)


def _write_json(file_path: pathlib.Path, contents: str) -> None:
    """
    Write text to a file and make sure it reached the disk
    :param file_path: File to create or truncate
    :param contents: Text to write
    """
    with file_path.open("w", encoding="utf-8", newline="\n") as file:
        file.write(contents)
        file.flush()
        os.fsync(file.fileno())


def _backup(file_path: pathlib.Path) -> Optional[pathlib.Path]:
    """
    Copy an already published file aside so it can be put back
    :param file_path: Published file
    :return: Backup location, None if nothing was published yet
    """
    if not file_path.exists():
        return None
    backup_path = _sibling(file_path, constants.BACKUP_FILE_SUFFIX)
    shutil.copy2(file_path, backup_path)
    return backup_path


def _restore(file_path: pathlib.Path, backup_path: Optional[pathlib.Path]) -> None:
    """
    Put a published file back to its state before this export
    :param file_path: File replaced during this export
    :param backup_path: Copy of the previous contents, None if it did not exist
    """
    try:
        if backup_path is None:
            file_path.unlink(missing_ok=True)
        else:
            os.replace(backup_path, file_path)
    except OSError as error:
        LOGGER.warning(f"Unable to restore {file_path}: {error}")


def _remove_quietly(file_path: pathlib.Path) -> None:
    try:
        file_path.unlink(missing_ok=True)
    except OSError as error:
        LOGGER.warning(f"Unable to remove {file_path}: {error}")


def validate_export_files(file_paths: Iterable[pathlib.Path]) -> Dict[pathlib.Path, int]:
    """
    Check published files before handing them to the API: each must exist,
    have content and hold a JSON array
    :param file_paths: Files to check
    :return: Number of records per file
    :raises ExportValidationError: For the first file failing a check
    """
    counts: Dict[pathlib.Path, int] = {}
    for file_path in file_paths:
        if not file_path.is_file() or file_path.stat().st_size == 0:
            raise ExportValidationError(file_path, "missing or empty")

        try:
            with file_path.open(encoding="utf-8") as file:
                contents = json.load(file)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
            raise ExportValidationError(file_path, f"is not valid JSON: {error}") from error

        if not isinstance(contents, list):
            raise ExportValidationError(file_path, "does not contain a JSON array")

        counts[file_path] = len(contents)
        LOGGER.info(f"Validated {file_path} ({len(contents)} records)")

    return counts
