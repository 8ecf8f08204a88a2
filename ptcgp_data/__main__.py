"""
PTCGP Data Main Executor
"""

import logging
import pathlib
import sys
import traceback
from typing import List, Optional

import gevent

from ptcgp_data import constants
from ptcgp_data.card_builder import get_all_cards
from ptcgp_data.module_loader import ModuleLoader
from ptcgp_data.output_generator import ExportPaths, validate_export_files, write_data
from ptcgp_data.parallel_call import parse_concurrency
from ptcgp_data.ptcgp_config import PtcgpConfig
from ptcgp_data.repository import SourceRepository, resolve_repo_dir
from ptcgp_data.set_builder import get_all_sets
from ptcgp_data.utils import init_logger

LOGGER: logging.Logger = logging.getLogger(__name__)


def apply_cli_overrides(config: PtcgpConfig, args) -> None:
    """
    Let command line flags win over environment and properties values
    :param config: Configuration built at start up
    :param args: Parsed command line
    """
    if args.repo_dir:
        config.repo_dir = args.repo_dir
    if args.output_dir:
        config.output_path = pathlib.Path(args.output_dir).expanduser().resolve()
    if args.concurrency is not None:
        config.concurrency = parse_concurrency(args.concurrency, default=config.concurrency)


def export_data(config: PtcgpConfig) -> ExportPaths:
    """
    Load every set and card from the tcgdex checkout and publish them
    :param config: Configuration to run with
    :return: Paths of the published files
    """
    repo_dir = resolve_repo_dir(config.repo_dir, config.project_root)
    repository = SourceRepository(
        repo_dir, config.series_dir_name, config.source_extension
    )
    loader = ModuleLoader(repo_dir)

    LOGGER.info(f"Reading {repository.data_root} with concurrency {config.concurrency}")

    # Sets and cards don't depend on each other, load both at once
    sets_job = gevent.spawn(get_all_sets, repository, loader, config.concurrency)
    cards_job = gevent.spawn(get_all_cards, repository, loader, config.concurrency)
    jobs = [sets_job, cards_job]
    try:
        gevent.joinall(jobs, raise_error=True)
    finally:
        gevent.killall(jobs, block=True)

    return write_data(cards_job.value, sets_job.value, config.output_path)


def main(argv: Optional[List[str]] = None) -> int:
    """
    PTCGP Data safe main call
    :param argv: Command line arguments, defaults to sys.argv
    :return: Process exit code
    """
    from ptcgp_data.arg_parser import parse_args

    init_logger()
    args = parse_args(argv)
    config = PtcgpConfig()
    apply_cli_overrides(config, args)

    LOGGER.info(
        f"Starting PTCGP data export {config.ptcgp_version} on {constants.PTCGP_BUILD_DATE}"
    )

    try:
        paths = export_data(config)
        if args.validate:
            validate_export_files(paths)
    except Exception as error:
        LOGGER.fatal(f"Exception caught: {error} {traceback.format_exc()}")
        return 1

    LOGGER.info("Export finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
