"""
PTCGP Data constants that cannot be changed and are hardcoded intentionally
"""

import datetime
import os
import pathlib

TOP_LEVEL_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
RESOURCE_PATH: pathlib.Path = TOP_LEVEL_DIR.joinpath("ptcgp_data").joinpath("resources")
CONFIG_PATH: pathlib.Path = RESOURCE_PATH.joinpath("ptcgp.properties")

LOG_PATH: pathlib.Path = (
    pathlib.Path(os.environ.get("PTCGP_LOG_PATH", TOP_LEVEL_DIR.joinpath("ptcgp_logs")))
    .expanduser()
    .resolve()
)
DEFAULT_OUTPUT_PATH: pathlib.Path = TOP_LEVEL_DIR.joinpath("data")

PTCGP_BUILD_DATE: str = datetime.datetime.today().strftime("%Y-%m-%d")

DEFAULT_REPO_DIR: str = "tcgdex"
SERIES_DIR_NAME: str = "Pokémon TCG Pocket"
SOURCE_FILE_EXTENSION: str = ".ts"

DEFAULT_LOCALE: str = "en"

DEFAULT_CONCURRENCY: int = 10
MAX_CONCURRENCY: int = 100

CARDS_FILE_NAME: str = "cards.json"
SETS_FILE_NAME: str = "sets.json"
TEMP_FILE_SUFFIX: str = ".tmp"
BACKUP_FILE_SUFFIX: str = ".bak"
JSON_INDENT: int = 2

# Raw set field describing the parent series; no longer published
DEPRECATED_SET_FIELDS: tuple = ("serie",)
