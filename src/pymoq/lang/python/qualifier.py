import itertools
import logging
from typing import Dict, Iterable, Iterator, Optional, Union

import griffe

from pymoq.spec import ImportSet
from .loader import SymbolTable
from .resolver import strip_vendor_path

logger = logging.getLogger(__name__)

# Modules the generated code always imports under their own name.
RESERVED_MODULES = ("typing", "dataclasses", "threading")

Annotation = Union[str, griffe.Expr, None]


def _candidates(short: str, parent_short: str) -> Iterator[str]:
    yield short
    if parent_short:
        yield f"{parent_short.lstrip('_')}_{short}"
    for n in itertools.count(2):
        yield f"{short}{n}"


class ImportQualifier:
    """
    Renders annotations for use inside the generated module.

    Every name reference is resolved to its defining module. References into
    the target package stay unqualified and are pulled in through relative
    imports; anything else is qualified with an alias of its module, and the
    module is recorded in the import set.
    """

    def __init__(self, symbols: SymbolTable, target_path: str):
        self.symbols = symbols
        self.target_path = target_path
        self.imports = ImportSet()

    def render(self, expr: Annotation) -> Optional[str]:
        if expr is None:
            return None
        if isinstance(expr, str):
            return expr
        if isinstance(expr, griffe.ExprName):
            return self._render_name(expr)
        if isinstance(expr, griffe.ExprAttribute):
            return self._render_attribute(expr)
        parts = []
        for element in expr.iterate(flat=False):
            if isinstance(element, griffe.Expr):
                parts.append(self.render(element) or "")
            else:
                parts.append(str(element))
        return "".join(parts)

    def _render_name(self, expr: griffe.ExprName) -> str:
        canonical = expr.canonical_path
        if "." not in canonical:
            # Builtins and names nothing could resolve.
            return expr.name
        return self.qualify(canonical)

    def _render_attribute(self, expr: griffe.ExprAttribute) -> str:
        canonical = expr.canonical_path
        if "." not in canonical:
            return str(expr)
        return self.qualify(canonical)

    def qualify(self, canonical_path: str) -> str:
        module, object_path = self.symbols.module_of(canonical_path)
        if not module:
            return canonical_path
        if module == "builtins":
            return object_path

        identity = strip_vendor_path(module)
        if self._is_local(identity):
            return self._qualify_local(identity, object_path)

        alias = self._module_alias(identity)
        if not object_path:
            return alias
        return f"{alias}.{object_path}"

    def _is_local(self, identity: str) -> bool:
        return identity == self.target_path or identity.startswith(
            self.target_path + "."
        )

    def _qualify_local(self, identity: str, object_path: str) -> str:
        if not object_path:
            if identity == self.target_path:
                return identity
            identity, _, object_path = identity.rpartition(".")
        relative = "." + identity[len(self.target_path) + 1 :]
        head = object_path.split(".")[0]
        alias = self._bind_relative(relative, head, [head])
        if alias is not None:
            return alias + object_path[len(head) :]

        # The bare name is taken: import the defining module and qualify with it.
        if relative == ".":
            alias = self._bind_relative(relative, head, _candidates(head, ""))
            return alias + object_path[len(head) :]
        parent, _, short = relative.rpartition(".")
        parent_short = (parent or self.target_path).rpartition(".")[2]
        parent = parent or "."
        alias = self._bind_relative(parent, short, _candidates(short, parent_short))
        logger.debug("qualifying %s from %s through %s", object_path, relative, alias)
        return f"{alias}.{object_path}"

    def _bind_relative(
        self, relative: str, name: str, candidates: Iterable[str]
    ) -> Optional[str]:
        existing = self.imports.relative_alias(relative, name)
        if existing:
            return existing
        taken = self._taken()
        for candidate in candidates:
            if candidate not in taken:
                self.imports.add_relative(relative, name, candidate)
                return candidate
        return None

    def _taken(self) -> Dict[str, str]:
        taken = {alias: module for module, alias in self.imports.modules.items()}
        for relative, names in self.imports.relative.items():
            for name, alias in names.items():
                taken.setdefault(alias, f"{relative}:{name}")
        for module in RESERVED_MODULES:
            taken.setdefault(module, module)
        return taken

    def _module_alias(self, module: str) -> str:
        existing = self.imports.alias_for(module)
        if existing:
            return existing

        taken = self._taken()
        parts = module.split(".")
        candidates = [parts[-1]]
        if len(parts) > 1:
            candidates.append(f"{parts[-2].lstrip('_')}_{parts[-1]}")

        alias = None
        for candidate in candidates:
            if taken.get(candidate, module) == module:
                alias = candidate
                break
        if alias is None:
            n = 2
            while f"{parts[-1]}{n}" in taken:
                n += 1
            alias = f"{parts[-1]}{n}"

        if alias != parts[-1]:
            logger.debug("importing %s as %s to avoid a name clash", module, alias)
        self.imports.add_module(module, alias)
        return alias
