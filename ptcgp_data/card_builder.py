"""
PTCGP card loading
"""

import logging
import pathlib
from typing import Any, Dict, List, Optional

from . import constants
from .exceptions import CardLoadError, InvalidConcurrencyError, ModuleLoadError
from .models import Card
from .module_loader import ModuleLoader
from .parallel_call import map_limit
from .repository import SourceRepository
from .ts_module import DEFAULT_EXPORT
from .utils import without_keys

LOGGER = logging.getLogger(__name__)


def get_owning_set_id(raw_card: Dict[str, Any], file_path: pathlib.Path) -> str:
    """
    Determine which set a card belongs to. The id of the nested set
    reference wins, the directory holding the card file is the fallback.
    :param raw_card: Card record as loaded
    :param file_path: File the card was loaded from
    :return: Set identifier
    """
    set_reference = raw_card.get("set")
    if isinstance(set_reference, dict):
        set_id = set_reference.get("id")
        if isinstance(set_id, str) and set_id:
            return set_id
    return file_path.parent.name


def build_card(raw_card: Dict[str, Any], file_path: pathlib.Path) -> Card:
    """
    Turn a raw tcgdex card into a Card
    :param raw_card: Card record as loaded
    :param file_path: File the card was loaded from
    :return: Normalized card
    """
    card = without_keys(raw_card, "set")
    card["set_id"] = get_owning_set_id(raw_card, file_path)
    return Card.model_validate(card)


def load_card_file(loader: ModuleLoader, file_path: pathlib.Path) -> Card:
    """
    Load a single card module. The record is either the default export or,
    for modules without one, the module's exports as a whole.
    :param loader: Module loader bound to the repository
    :param file_path: Card module
    :return: Normalized card
    """
    try:
        module = loader.load(file_path)
        raw_card = module[DEFAULT_EXPORT] if DEFAULT_EXPORT in module else module
        if not isinstance(raw_card, dict):
            raise ModuleLoadError(
                file_path, f"Card record must be an object, not {type(raw_card).__name__}"
            )
        return build_card(raw_card, file_path)
    except Exception as error:
        raise CardLoadError(f"Failed to import card file {file_path}: {error}") from error


def get_all_cards(
    repository: SourceRepository,
    loader: ModuleLoader,
    concurrency: Optional[int] = None,
) -> List[Card]:
    """
    Load all card files and attach the corresponding set identifier
    :param repository: tcgdex checkout to read from
    :param loader: Module loader bound to the repository
    :param concurrency: Maximum number of files loaded in parallel
    :return: Cards in file discovery order
    """
    if concurrency is None:
        concurrency = constants.DEFAULT_CONCURRENCY

    try:
        card_files = repository.card_files()
        LOGGER.info(f"Loading {len(card_files)} card files")
        cards = map_limit(card_files, concurrency, lambda path: load_card_file(loader, path))
    except (CardLoadError, InvalidConcurrencyError):
        raise
    except Exception as error:
        raise CardLoadError(f"Failed to load cards: {error}") from error

    LOGGER.info(f"Loaded {len(cards)} cards")
    return cards
