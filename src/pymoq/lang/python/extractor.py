import logging
from typing import Iterable, List, Optional, Set

import griffe

from pymoq.spec import (
    ContractDef,
    LoadError,
    MethodDef,
    NotAnInterface,
    NotFound,
    ParamDef,
    ParamKind,
)
from .loader import SymbolTable
from .qualifier import ImportQualifier

logger = logging.getLogger(__name__)

PROTOCOL_BASES = {"typing.Protocol", "typing_extensions.Protocol"}
CONTRACT_BASES = PROTOCOL_BASES | {"abc.ABC"}
CONTRACT_METACLASSES = {"abc.ABCMeta"}

# Members that describe data rather than behaviour.
_SKIPPED_LABELS = {"property", "staticmethod", "classmethod"}

_KIND_MAP = {
    griffe.ParameterKind.positional_only: ParamKind.POSITIONAL_ONLY,
    griffe.ParameterKind.positional_or_keyword: ParamKind.POSITIONAL_OR_KEYWORD,
    griffe.ParameterKind.var_positional: ParamKind.VAR_POSITIONAL,
    griffe.ParameterKind.keyword_only: ParamKind.KEYWORD_ONLY,
    griffe.ParameterKind.var_keyword: ParamKind.VAR_KEYWORD,
}


def _base_path(base: object) -> Optional[str]:
    while isinstance(base, griffe.ExprSubscript):
        base = base.left
    if isinstance(base, (griffe.ExprName, griffe.ExprAttribute)):
        return base.canonical_path
    if isinstance(base, str):
        return base
    return None


def is_anonymous(name: str) -> bool:
    # "_" and the pre-PEP 570 "__name" spelling of positional-only parameters
    # carry no name a caller could rely on.
    return name == "_" or (name.startswith("__") and not name.endswith("__"))


def _synthesized_name(index: int, taken: Set[str]) -> str:
    while f"in{index}" in taken:
        index += 1
    return f"in{index}"


class SignatureExtractor:
    def __init__(self, symbols: SymbolTable, qualifier: ImportQualifier):
        self.symbols = symbols
        self.qualifier = qualifier

    def extract(self, names: Iterable[str]) -> List[ContractDef]:
        contracts = []
        for name in names:
            obj = self.symbols.lookup(name)
            if obj is None:
                raise NotFound(name)
            if not obj.is_class or not self.is_contract(obj):
                raise NotAnInterface(name, obj.kind.value)
            contracts.append(self._extract_contract(name, obj))
        return contracts

    def is_contract(self, cls: griffe.Class, seen: Optional[Set[str]] = None) -> bool:
        seen = seen if seen is not None else set()
        if cls.path in seen:
            return False
        seen.add(cls.path)

        for base in cls.bases:
            if _base_path(base) in CONTRACT_BASES:
                return True
        keywords = getattr(cls, "keywords", None) or {}
        if _base_path(keywords.get("metaclass")) in CONTRACT_METACLASSES:
            return True
        for resolved in cls.resolved_bases:
            if self.is_contract(resolved, seen):
                return True
        return False

    def is_protocol(self, cls: griffe.Class) -> bool:
        # A subclass of a protocol is only a protocol if it lists Protocol again.
        return any(_base_path(base) in PROTOCOL_BASES for base in cls.bases)

    def _method_names(self, cls: griffe.Class) -> List[str]:
        # Own members first, then whatever the MRO promotes from the bases.
        names = list(cls.members)
        for base in cls.mro():
            for name in base.members:
                if name not in names:
                    names.append(name)
        return names

    def _extract_contract(self, name: str, cls: griffe.Class) -> ContractDef:
        contract = ContractDef(
            name=name,
            reference=self.qualifier.qualify(cls.path),
            nominal=not self.is_protocol(cls),
        )
        all_members = cls.all_members
        for member_name in self._method_names(cls):
            if member_name.startswith("_") or member_name not in all_members:
                continue
            member = all_members[member_name]
            if member.is_alias:
                try:
                    member = member.final_target
                except (griffe.AliasResolutionError, griffe.CyclicAliasError) as e:
                    raise LoadError(
                        f"cannot resolve {name}.{member_name}: {e}"
                    ) from e
            if not member.is_function or member.labels & _SKIPPED_LABELS:
                continue
            contract.methods.append(self._extract_method(member))
        logger.debug("%s: %d method(s)", name, len(contract.methods))
        return contract

    def _extract_method(self, func: griffe.Function) -> MethodDef:
        method = MethodDef(name=func.name, is_async="async" in func.labels)
        method.params = self.extract_params(func)
        returns = self.qualifier.render(func.returns)
        if returns is not None:
            method.returns = [ParamDef(name="out1", annotation=returns)]
        return method

    def extract_params(self, func: griffe.Function) -> List[ParamDef]:
        parameters = list(func.parameters)
        if parameters and parameters[0].name in ("self", "cls"):
            parameters = parameters[1:]

        # Synthesized names must not shadow the explicit ones.
        taken = {p.name for p in parameters if not is_anonymous(p.name)}
        params = []
        for index, parameter in enumerate(parameters, start=1):
            kind = _KIND_MAP.get(parameter.kind, ParamKind.POSITIONAL_OR_KEYWORD)
            variadic = kind == ParamKind.VAR_POSITIONAL
            keyword_variadic = kind == ParamKind.VAR_KEYWORD
            name = parameter.name
            if is_anonymous(name):
                name = _synthesized_name(index, taken)
            taken.add(name)
            # griffe reports `()` and `{}` as defaults of *args and **kwargs.
            default = None
            if not (variadic or keyword_variadic):
                default = self.qualifier.render(parameter.default)
            params.append(
                ParamDef(
                    name=name,
                    annotation=self.qualifier.render(parameter.annotation),
                    kind=kind,
                    default=default,
                    variadic=variadic,
                    keyword_variadic=keyword_variadic,
                )
            )
        return params
