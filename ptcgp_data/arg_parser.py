"""
PTCGP Data Arg Parser to determine what actions to take
"""

import argparse
from typing import List, Optional


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments from user to determine how to run the export.
    Flags override the environment and the properties file.
    :param argv: Arguments to parse, defaults to sys.argv
    :return: Namespace of requests
    """
    parser = argparse.ArgumentParser(
        "ptcgp_data",
        description="Export Pokémon TCG Pocket sets and cards from a tcgdex checkout.",
    )

    parser.add_argument(
        "--repo-dir",
        "-r",
        type=str,
        metavar="DIR",
        help="tcgdex/cards-database checkout to read from (overrides TCGDEX_REPO).",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        metavar="DIR",
        help="Directory to write cards.json and sets.json into (overrides PTCGP_OUTPUT_PATH).",
    )
    parser.add_argument(
        "--concurrency",
        "-c",
        type=str,
        metavar="N",
        help="Number of data files loaded at once, capped at 100 (overrides CONCURRENCY).",
    )
    parser.add_argument(
        "--validate",
        "-V",
        action="store_true",
        help="Check the written files are non-empty JSON arrays before exiting.",
    )

    return parser.parse_args(argv)
