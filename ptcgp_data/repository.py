"""
Location and discovery of data modules inside the tcgdex checkout
"""

import logging
import os
import pathlib
import re
from typing import List, Optional, Union

from . import constants
from .exceptions import RepositoryConfigError

LOGGER = logging.getLogger(__name__)

_CONTROL_CHARACTERS = re.compile(r"[\0\r\n]")


def resolve_repo_dir(
    raw_dir: Optional[str], project_root: Union[str, pathlib.Path]
) -> pathlib.Path:
    """
    Resolve the tcgdex repository directory from a configured value
    :param raw_dir: Configured directory (TCGDEX_REPO), relative to the working directory
    :param project_root: Directory the repository must live in
    :return: Real path of the repository
    :raises RepositoryConfigError: When the path has control characters,
        escapes the project or does not exist
    """
    raw_dir = raw_dir or constants.DEFAULT_REPO_DIR
    if _CONTROL_CHARACTERS.search(raw_dir):
        raise RepositoryConfigError("Invalid characters in TCGDEX_REPO")

    directory = pathlib.Path(os.path.abspath(raw_dir))
    real_dir = directory.resolve()
    root = pathlib.Path(project_root).resolve()

    if real_dir != root and root not in real_dir.parents:
        raise RepositoryConfigError(
            f"TCGDEX_REPO must be inside the project directory: {directory}"
        )

    if not real_dir.is_dir():
        raise RepositoryConfigError(
            f"Directory '{directory}' not found. "
            "Please clone tcgdex/cards-database here."
        )

    LOGGER.debug(f"Using tcgdex repository at {real_dir}")
    return real_dir


class SourceRepository:
    """
    A validated tcgdex checkout and the glob patterns used to find
    set and card data modules inside it
    """

    root: pathlib.Path
    data_root: pathlib.Path
    extension: str

    def __init__(
        self,
        root: pathlib.Path,
        series_dir_name: str = constants.SERIES_DIR_NAME,
        extension: str = constants.SOURCE_FILE_EXTENSION,
    ):
        self.root = root
        self.data_root = root.joinpath("data", series_dir_name)
        self.extension = extension

    @property
    def sets_glob(self) -> str:
        """Pattern matching set files directly under the series directory"""
        return f"*{self.extension}"

    @property
    def cards_glob(self) -> str:
        """Pattern matching card files one directory below the series directory"""
        return f"*/*{self.extension}"

    def set_files(self) -> List[pathlib.Path]:
        """
        Find every set definition file
        :return: Sorted file paths
        """
        return self._discover(self.sets_glob)

    def card_files(self) -> List[pathlib.Path]:
        """
        Find every card definition file
        :return: Sorted file paths
        """
        return self._discover(self.cards_glob)

    def _discover(self, pattern: str) -> List[pathlib.Path]:
        files = sorted(
            path for path in self.data_root.glob(pattern) if path.is_file()
        )
        LOGGER.debug(f"Found {len(files)} files matching {self.data_root / pattern}")
        return files
