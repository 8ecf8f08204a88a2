"""Pytest configuration and fixtures for PTCGP Data tests."""

import pathlib
import textwrap

import pytest

from ptcgp_data.module_loader import ModuleLoader
from ptcgp_data.repository import SourceRepository

SERIES = "Pokémon TCG Pocket"

SERIE_MODULE = """
import { Serie } from '../interfaces'

const serie: Serie = {
	id: 'tcgp',
	name: {
		en: 'Pokémon TCG Pocket',
	},
}

export default serie
"""

GENETIC_APEX_MODULE = """
import { Set } from "../../interfaces"
import serie from "../Pokémon TCG Pocket"

const set: Set = {
	id: "A1",
	name: {
		en: "Genetic Apex",
		fr: "Puissance Génétique",
	},
	serie: serie,
	cardCount: {
		official: 226,
	},
	releaseDate: "2024-10-30",
	boosters: {
		mewtwo: { name: { en: "Mewtwo" } },
		pikachu: { name: { en: "Pikachu" } },
	},
}

export default set
"""

MYTHICAL_ISLAND_MODULE = """
import { Set } from "../../interfaces"
import serie from "../Pokémon TCG Pocket"

const set: Set = {
	id: "A1a",
	name: { en: "Mythical Island" },
	serie,
	cardCount: { official: 68 },
	releaseDate: "2024-12-17",
}

export default set
"""

BULBASAUR_MODULE = """
import { Card } from "../../../interfaces"
import Set from "../Genetic Apex"

const card: Card = {
	set: Set,
	name: {
		en: "Bulbasaur",
		fr: "Bulbizarre",
	},
	illustrator: "Narumi Sato",
	rarity: "One Diamond",
	category: "Pokemon",
	hp: 70,
	types: ["Grass"],
	stage: "Basic",
	attacks: [{
		name: { en: "Vine Whip" },
		damage: 40,
		cost: ["Grass", "Colorless"],
	}],
	weaknesses: [{ type: "Fire", value: "+20" }],
	retreat: 1,
	boosters: ["mewtwo"],
}

export default card
"""

MEW_MODULE = """
import { Card } from "../../../interfaces"

const card: Card = {
	name: { en: "Mew" },
	category: "Pokemon",
	hp: 60,
	types: ["Psychic"],
	boosters: undefined,
}

export default card
"""


def write_module(path: pathlib.Path, source: str) -> pathlib.Path:
    """Write a data module, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def project_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """Project directory the tcgdex checkout lives in."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def tcgdex_repo(project_root: pathlib.Path) -> pathlib.Path:
    """
    A small tcgdex checkout: two sets, one card referencing its set by
    import and one card relying on its directory name.
    """
    repo = project_root / "tcgdex"
    data = repo / "data"
    write_module(data / f"{SERIES}.ts", SERIE_MODULE)
    write_module(data / SERIES / "Genetic Apex.ts", GENETIC_APEX_MODULE)
    write_module(data / SERIES / "Mythical Island.ts", MYTHICAL_ISLAND_MODULE)
    write_module(data / SERIES / "Genetic Apex" / "001.ts", BULBASAUR_MODULE)
    write_module(data / SERIES / "A1a" / "032.ts", MEW_MODULE)
    return repo


@pytest.fixture
def repository(tcgdex_repo: pathlib.Path) -> SourceRepository:
    return SourceRepository(tcgdex_repo.resolve())


@pytest.fixture
def loader(tcgdex_repo: pathlib.Path) -> ModuleLoader:
    return ModuleLoader(tcgdex_repo)


@pytest.fixture
def series_dir(tcgdex_repo: pathlib.Path) -> pathlib.Path:
    """Directory holding the set modules of the fake checkout."""
    return tcgdex_repo / "data" / SERIES


@pytest.fixture
def module_writer():
    """Helper writing a dedented data module to disk."""
    return write_module
