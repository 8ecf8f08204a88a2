"""Dynamic version read from ptcgp.properties."""

import configparser
import pathlib

_config = configparser.ConfigParser()
_config.read(pathlib.Path(__file__).parent / "resources" / "ptcgp.properties", encoding="utf-8")
__version__ = _config.get("PTCGP", "version", fallback="1.0.0+fallback")
