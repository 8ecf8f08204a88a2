"""
PTCGP set loading
"""

import logging
import pathlib
from typing import Any, Dict, List, Optional

from . import constants
from .exceptions import InvalidConcurrencyError, ModuleLoadError, SetLoadError
from .models import SetInfo
from .module_loader import ModuleLoader
from .parallel_call import map_limit
from .repository import SourceRepository
from .ts_module import DEFAULT_EXPORT
from .utils import without_keys

LOGGER = logging.getLogger(__name__)


def build_set_info(raw_set: Dict[str, Any], file_path: pathlib.Path) -> SetInfo:
    """
    Turn a raw tcgdex set into a SetInfo
    :param raw_set: Default export of the set module
    :param file_path: File the set was loaded from
    :return: Normalized set
    """
    set_info = without_keys(raw_set, *constants.DEPRECATED_SET_FIELDS)
    name = set_info.get("name")
    # Blank scalars count as missing, an empty map is kept
    if name is None or (isinstance(name, (str, int, float)) and not name):
        set_info["name"] = {constants.DEFAULT_LOCALE: file_path.stem}
    return SetInfo.model_validate(set_info)


def load_set_file(loader: ModuleLoader, file_path: pathlib.Path) -> SetInfo:
    """
    Load a single set module
    :param loader: Module loader bound to the repository
    :param file_path: Set module
    :return: Normalized set
    """
    try:
        module = loader.load(file_path)
        raw_set = module.get(DEFAULT_EXPORT)
        if not isinstance(raw_set, dict):
            raise ModuleLoadError(file_path, "Set module has no default export object")
        return build_set_info(raw_set, file_path)
    except Exception as error:
        raise SetLoadError(f"Failed to import set file {file_path}: {error}") from error


def get_all_sets(
    repository: SourceRepository,
    loader: ModuleLoader,
    concurrency: Optional[int] = None,
) -> List[SetInfo]:
    """
    Read all set definition files
    :param repository: tcgdex checkout to read from
    :param loader: Module loader bound to the repository
    :param concurrency: Maximum number of files loaded in parallel
    :return: Sets in file discovery order
    """
    if concurrency is None:
        concurrency = constants.DEFAULT_CONCURRENCY

    try:
        set_files = repository.set_files()
        LOGGER.info(f"Loading {len(set_files)} set files")
        sets = map_limit(set_files, concurrency, lambda path: load_set_file(loader, path))
    except (SetLoadError, InvalidConcurrencyError):
        raise
    except Exception as error:
        raise SetLoadError(f"Failed to load sets: {error}") from error

    LOGGER.info(f"Loaded {len(sets)} sets")
    return sets
