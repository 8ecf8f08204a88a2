"""
PTCGP Data, a Pokémon TCG Pocket exporter for tcgdex/cards-database
"""

from ._version import __version__
from .card_builder import get_all_cards
from .models import Card, SetInfo
from .output_generator import ExportPaths, write_data
from .parallel_call import map_limit, parse_concurrency
from .set_builder import get_all_sets

__all__ = [
    "Card",
    "ExportPaths",
    "SetInfo",
    "__version__",
    "get_all_cards",
    "get_all_sets",
    "map_limit",
    "parse_concurrency",
    "write_data",
]
