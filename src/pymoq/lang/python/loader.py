import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import griffe

from pymoq.config.loader import DEFAULT_TEST_MARKERS
from pymoq.spec import LoadError, ModuleDescriptor
from .resolver import is_test_name

logger = logging.getLogger(__name__)

_RESOLUTION_ERRORS = (griffe.AliasResolutionError, griffe.CyclicAliasError)


class SymbolTable:
    """
    Read-only view over the Griffe object tree of one package.

    The scope of a package is its ``__init__`` plus the top level of every
    direct non-test module next to it, in the same way every file of a
    directory contributes to one namespace.
    """

    def __init__(
        self,
        package: griffe.Module,
        loader: griffe.GriffeLoader,
        test_markers: Sequence[str] = DEFAULT_TEST_MARKERS,
        unresolved: int = 0,
    ):
        self.package = package
        # Aliases elsewhere in the tree that could not be followed; tolerated.
        self.unresolved = unresolved
        self._loader = loader
        self._test_markers = tuple(test_markers)
        self._scopes: Optional[List[griffe.Module]] = None

    @property
    def path(self) -> str:
        return self.package.path

    def scopes(self) -> List[griffe.Module]:
        if self._scopes is None:
            scopes = [self.package]
            for name in sorted(self.package.members):
                member = self.package.members[name]
                if member.is_alias or not member.is_module:
                    continue
                if member.is_package:
                    continue
                if is_test_name(name, self._test_markers):
                    continue
                scopes.append(member)
            self._scopes = scopes
        return self._scopes

    def lookup(self, name: str) -> Optional[griffe.Object]:
        for scope in self.scopes():
            member = scope.members.get(name)
            if member is None:
                continue
            if member.is_alias:
                try:
                    return member.final_target
                except _RESOLUTION_ERRORS as e:
                    raise LoadError(f"cannot resolve {name} in {scope.path}: {e}") from e
            if scope is self.package and member.is_module:
                # Submodules are scopes, not symbols.
                continue
            return member
        return None

    def get(self, path: str) -> Optional[Union[griffe.Object, griffe.Alias]]:
        try:
            obj = self._loader.modules_collection[path]
        except (KeyError, ValueError, *_RESOLUTION_ERRORS):
            return None
        if obj.is_alias:
            try:
                return obj.final_target
            except _RESOLUTION_ERRORS:
                return None
        return obj

    def module_of(self, path: str) -> Tuple[str, str]:
        """Splits a canonical path into its defining module and object path."""
        obj = self.get(path)
        if obj is not None:
            if obj.is_module:
                return obj.path, ""
            module_path = obj.module.path
            return module_path, obj.path[len(module_path) + 1 :]
        module, _, name = path.rpartition(".")
        return module, name


def load_symbols(
    descriptor: ModuleDescriptor,
    search_paths: Iterable[Path] = (),
    test_markers: Sequence[str] = DEFAULT_TEST_MARKERS,
) -> SymbolTable:
    roots: List[str] = [str(descriptor.root)]
    for path in search_paths:
        if str(path) not in roots:
            roots.append(str(path))

    logger.debug("loading %s from %s", descriptor.import_path, roots)
    loader = griffe.GriffeLoader(search_paths=roots)
    try:
        package = loader.load(
            descriptor.import_path, submodules=True, try_relative_path=False
        )
    except (ImportError, SyntaxError, OSError, griffe.GriffeError) as e:
        raise LoadError(f"cannot load {descriptor.import_path}: {e}") from e

    if not isinstance(package, griffe.Module):
        raise LoadError(f"{descriptor.import_path} is not a module")

    try:
        unresolved, _ = loader.resolve_aliases(implicit=True, external=True)
    except (ImportError, SyntaxError, OSError, griffe.GriffeError) as e:
        raise LoadError(f"cannot resolve imports of {descriptor.import_path}: {e}") from e

    if unresolved:
        logger.debug("%d alias(es) left unresolved", len(unresolved))

    return SymbolTable(package, loader, test_markers, unresolved=len(unresolved))

