"""
PTCGP Data Configuration Service
"""

import configparser
import logging
import os
import pathlib
from typing import Mapping, Optional

from . import constants
from .parallel_call import parse_concurrency

SECTION = "PTCGP"


class PtcgpConfig:
    """
    Configuration Class that loads in the appropriate configuration file,
    applies environment overrides and provides the contents for the running
    program. Built once at start up and handed to whatever needs it.
    """

    logger: logging.Logger
    config_parser: configparser.ConfigParser
    ptcgp_version: str
    project_root: pathlib.Path
    repo_dir: str
    output_path: pathlib.Path
    concurrency: int
    series_dir_name: str
    source_extension: str

    def __init__(
        self,
        config_path: Optional[pathlib.Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        project_root: Optional[pathlib.Path] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.config_parser = configparser.ConfigParser()
        environ = os.environ if environ is None else environ

        config_path = config_path or constants.CONFIG_PATH
        if config_path.is_file():
            self.logger.debug(f"Loading configuration from {config_path}")
            self.config_parser.read(str(config_path), encoding="utf-8")
        else:
            self.logger.warning(
                f"Configuration file {config_path} not found, using defaults"
            )

        self.ptcgp_version = self.get(SECTION, "version", "NO_VERSION_FOUND")
        self.project_root = (project_root or constants.TOP_LEVEL_DIR).resolve()

        self.repo_dir = environ.get("TCGDEX_REPO") or self.get(
            SECTION, "repo_dir", constants.DEFAULT_REPO_DIR
        )

        output_path = environ.get("PTCGP_OUTPUT_PATH") or self.get(
            SECTION, "output_path"
        )
        self.output_path = (
            pathlib.Path(output_path).expanduser().resolve()
            if output_path
            else constants.DEFAULT_OUTPUT_PATH
        )

        raw_concurrency = environ.get("CONCURRENCY")
        if raw_concurrency is None:
            raw_concurrency = self.get(SECTION, "concurrency") or None
        self.concurrency = parse_concurrency(raw_concurrency)

        self.series_dir_name = self.get(
            SECTION, "series_dir_name", constants.SERIES_DIR_NAME
        )
        self.source_extension = self.get(
            SECTION, "source_extension", constants.SOURCE_FILE_EXTENSION
        )

    def get(self, section: str, option: str, fallback: str = "") -> str:
        """
        Read a properties value, treating blank entries as unset
        :param section: Properties section, normally PTCGP
        :param option: Key to read
        :param fallback: Returned when the key is absent or blank
        :return: Configured value
        """
        if not self.has_option(section, option):
            return fallback
        return self.config_parser.get(section, option)

    def has_option(self, section: str, option: str) -> bool:
        """Whether the key exists in the section with a non-blank value"""
        return bool(self.config_parser.get(section, option, fallback="").strip())
