"""
Installation setup for ptcgp_data
"""
import configparser
import pathlib

import setuptools

# Establish project directory
project_root: pathlib.Path = pathlib.Path(__file__).resolve().parent

# Read config details to determine version-ing
config_file = project_root.joinpath("ptcgp_data/resources/ptcgp.properties")
config = configparser.ConfigParser()
if config_file.is_file():
    config.read(str(config_file), encoding="utf-8")


def read_requirements(file_name: str) -> list:
    """
    Requirements from a requirements file, if able
    :param file_name: File in the project directory
    :return: Requirement specifiers
    """
    requirements_file = project_root.joinpath(file_name)
    if not requirements_file.is_file():
        return []
    return [
        line.strip()
        for line in requirements_file.open(encoding="utf-8").readlines()
        if line.strip() and not line.startswith("#")
    ]


setuptools.setup(
    name="ptcgp-data",
    version=config.get("PTCGP", "version", fallback="1.0.0+fallback"),
    description="Pokémon TCG Pocket card and set exporter for tcgdex/cards-database",
    long_description=project_root.joinpath("README.md").open(encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python",
        "Topic :: Database",
    ],
    keywords=[
        "Card Games",
        "Collectible",
        "JSON",
        "Pokemon",
        "PTCGP",
        "tcgdex",
        "Trading Cards",
    ],
    python_requires=">=3.10",
    include_package_data=True,
    packages=setuptools.find_packages(include=["ptcgp_data", "ptcgp_data.*"]),
    package_data={"ptcgp_data": ["resources/*.properties"]},
    install_requires=read_requirements("requirements.txt"),
    extras_require={"test": read_requirements("requirements_test.txt")},
    entry_points={"console_scripts": ["ptcgp-data = ptcgp_data.__main__:main"]},
)
