"""
Loading of data modules from inside the tcgdex checkout
"""

import copy
import json
import logging
import pathlib
from typing import Any, Dict, Tuple, Union

import gevent

from .exceptions import ModuleLoadError, UnsafeModulePathError
from .ts_module import DEFAULT_EXPORT, ImportReference, parse_module

LOGGER = logging.getLogger(__name__)

SCRIPT_SUFFIXES = (".ts", ".js")
RESOLVABLE_SUFFIXES = (".ts", ".js", ".json")


class ModuleLoader:
    """
    Reads data modules beneath a repository root and returns their exports.
    Nothing is ever executed: TypeScript modules are parsed statically,
    JSON documents are decoded and exposed as the default export.
    """

    root: pathlib.Path
    _cache: Dict[pathlib.Path, Dict[str, Any]]

    def __init__(self, root: Union[str, pathlib.Path]):
        self.root = pathlib.Path(root).resolve()
        self._cache = {}

    def load(self, file_path: Union[str, pathlib.Path]) -> Dict[str, Any]:
        """
        Load a data module
        :param file_path: Module to load, must be inside the repository
        :return: Exports by name, the default export under "default"
        :raises UnsafeModulePathError: Path escapes the repository
        :raises ModuleLoadError: Module can't be read or parsed
        """
        resolved = self.validate_path(file_path)
        return copy.deepcopy(self._load_resolved(resolved, ()))

    def validate_path(self, file_path: Union[str, pathlib.Path]) -> pathlib.Path:
        """
        Make sure a module path is strictly inside the repository
        :param file_path: Path to check
        :return: Resolved path
        """
        resolved = pathlib.Path(file_path).resolve()
        if self.root not in resolved.parents:
            raise UnsafeModulePathError(file_path)
        return resolved

    def _load_resolved(
        self, file_path: pathlib.Path, chain: Tuple[pathlib.Path, ...]
    ) -> Dict[str, Any]:
        if file_path in chain:
            raise ModuleLoadError(file_path, "Circular import")
        if file_path in self._cache:
            return self._cache[file_path]

        source = self._read(file_path)
        if file_path.suffix == ".json":
            try:
                exports = {DEFAULT_EXPORT: json.loads(source)}
            except json.JSONDecodeError as error:
                raise ModuleLoadError(file_path, error.msg, error.lineno) from error
        elif file_path.suffix in SCRIPT_SUFFIXES:
            exports = parse_module(source, file_path).exports
        else:
            raise ModuleLoadError(file_path, f"Unsupported file type '{file_path.suffix}'")

        exports = self._resolve_references(exports, file_path, chain + (file_path,))
        self._cache[file_path] = exports
        LOGGER.debug(f"Loaded data module {file_path}")
        return exports

    @staticmethod
    def _read(file_path: pathlib.Path) -> str:
        try:
            # Blocking file reads go through the hub's thread pool so other
            # greenlets keep running
            return gevent.get_hub().threadpool.apply(
                file_path.read_text, kwds={"encoding": "utf-8-sig"}
            )
        except (OSError, UnicodeDecodeError) as error:
            raise ModuleLoadError(file_path, str(error)) from error

    def _resolve_references(
        self, value: Any, importer: pathlib.Path, chain: Tuple[pathlib.Path, ...]
    ) -> Any:
        if isinstance(value, ImportReference):
            return self._resolve_import(value, importer, chain)
        if isinstance(value, dict):
            return {
                key: self._resolve_references(item, importer, chain)
                for key, item in value.items()
            }
        if isinstance(value, list):
            return [self._resolve_references(item, importer, chain) for item in value]
        return value

    def _resolve_import(
        self,
        reference: ImportReference,
        importer: pathlib.Path,
        chain: Tuple[pathlib.Path, ...],
    ) -> Any:
        if not reference.source.startswith((".", "/")):
            raise ModuleLoadError(
                importer,
                f"Cannot resolve import '{reference.source}' outside the repository",
                reference.line,
            )

        target = self._find_module(
            importer.parent.joinpath(reference.source), reference, importer
        )
        exports = copy.deepcopy(self._load_resolved(target, chain))

        if reference.name == "*":
            return exports
        if reference.name not in exports:
            raise ModuleLoadError(
                importer,
                f"'{reference.source}' has no export named '{reference.name}'",
                reference.line,
            )
        return exports[reference.name]

    def _find_module(
        self, base: pathlib.Path, reference: ImportReference, importer: pathlib.Path
    ) -> pathlib.Path:
        candidates = [base]
        for suffix in RESOLVABLE_SUFFIXES:
            candidates.append(base.parent.joinpath(base.name + suffix))
        for suffix in RESOLVABLE_SUFFIXES:
            candidates.append(base.joinpath("index" + suffix))

        for candidate in candidates:
            if candidate.is_file():
                return self.validate_path(candidate)

        raise ModuleLoadError(
            importer, f"Cannot find module '{reference.source}'", reference.line
        )
