from typing import Dict, List, Mapping

from pymoq.spec import ContractDef, ImportSet, MethodDef, MockDocument, NameCollision
from .naming import INITIALISMS, exported

HEADER = "# Code generated by pymoq; DO NOT EDIT."


class MockGenerator:
    """
    Renders a MockDocument into Python source.

    The output is syntactically complete but not yet canonical; it is meant
    to go through the formatter before anyone reads it.
    """

    def __init__(
        self, indent_spaces: int = 4, initialisms: Mapping[str, str] = INITIALISMS
    ):
        self._indent_str = " " * indent_spaces
        self._initialisms = initialisms

    def generate(self, document: MockDocument) -> str:
        lines = [HEADER]
        lines.append(f'"""Mocks for package {document.package_name}."""')
        lines.append("")
        lines.extend(self._generate_imports(document))
        lines.append("")

        for contract in document.contracts:
            self.check_names(contract)

        for contract in document.contracts:
            lines.append("")
            lines.append(self._generate_mock(contract))
            lines.append("")

        lines.append("")
        lines.append("if typing.TYPE_CHECKING:")
        for contract in document.contracts:
            mock_name = self.mock_name(contract)
            lines.append(
                f"{self._indent(1)}_assert_{contract.name}: {contract.reference} = {mock_name}()"
            )
        if not document.contracts:
            lines.append(f"{self._indent(1)}pass")

        return "\n".join(lines) + "\n"

    def mock_name(self, contract: ContractDef) -> str:
        return f"{contract.name}Mock"

    def record_name(self, method: MethodDef) -> str:
        return f"{exported(method.name, self._initialisms)}Call"

    def member_names(self, method: MethodDef) -> List[str]:
        return [
            method.name,
            f"{method.name}_func",
            f"{method.name}_calls",
            f"_{method.name}_calls",
            self.record_name(method),
        ]

    def check_names(self, contract: ContractDef) -> None:
        """Fails when two methods would generate the same mock member."""
        owners: Dict[str, str] = {}
        for method in contract.methods:
            for member in self.member_names(method):
                owner = owners.setdefault(member, method.name)
                if owner != method.name:
                    raise NameCollision(
                        f"{self.mock_name(contract)}.{member} would be generated "
                        f"for both {contract.name}.{owner} and {contract.name}.{method.name}"
                    )

    def _indent(self, level: int) -> str:
        return self._indent_str * level

    def _generate_imports(self, document: MockDocument) -> List[str]:
        imports = ImportSet(
            modules=dict(document.imports.modules),
            relative={k: dict(v) for k, v in document.imports.relative.items()},
        )
        imports.add_module("typing", "typing")
        if document.uses_methods:
            # Call bookkeeping needs records and a lock.
            imports.add_module("dataclasses", "dataclasses")
            imports.add_module("threading", "threading")
        return ["from __future__ import annotations", ""] + imports.statements()

    def _generate_docstring(self, contract: ContractDef, level: int) -> List[str]:
        indent = self._indent(level)
        mock_name = self.mock_name(contract)
        lines = [
            f'{indent}"""',
            f"{indent}{mock_name} is a mock implementation of {contract.name}.",
        ]
        if contract.methods:
            lines.append("")
            lines.append(f"{indent}Example::")
            lines.append("")
            lines.append(f"{indent}    mocked = {mock_name}(")
            for method in contract.methods:
                args = ", ".join(
                    p.call_name() if p.variadic or p.keyword_variadic else p.name
                    for p in method.params
                )
                lambda_head = f"lambda {args}" if args else "lambda"
                lines.append(f"{indent}        {method.name}_func={lambda_head}: ...,")
            lines.append(f"{indent}    )")
            lines.append("")
            lines.append(f"{indent}    # use mocked in code that requires {contract.name}")
            lines.append(f"{indent}    # and then make assertions on the recorded calls.")
        lines.append(f'{indent}"""')
        return lines

    def _generate_record(self, method: MethodDef, level: int) -> List[str]:
        indent = self._indent(level)
        lines = [
            f"{indent}@dataclasses.dataclass(frozen=True)",
            f"{indent}class {self.record_name(method)}:",
        ]
        if not method.params:
            lines.append(f"{self._indent(level + 1)}pass")
        for param in method.params:
            lines.append(
                f"{self._indent(level + 1)}{param.name}: {param.record_annotation()}"
            )
        return lines

    def _generate_init(self, contract: ContractDef, level: int) -> List[str]:
        indent = self._indent(level)
        body = self._indent(level + 1)
        mock_name = self.mock_name(contract)
        lines = [f"{indent}def __init__(", f"{body}self,", f"{body}*,"]
        for method in contract.methods:
            lines.append(
                f"{body}{method.name}_func: "
                f"typing.Optional[{method.callable_annotation()}] = None,"
            )
        lines.append(f"{indent}) -> None:")
        for method in contract.methods:
            lines.append(f"{body}self.{method.name}_func = {method.name}_func")
        for method in contract.methods:
            lines.append(
                f"{body}self._{method.name}_calls: "
                f"typing.List[{mock_name}.{self.record_name(method)}] = []"
            )
        lines.append(f"{body}self._lock = threading.Lock()")
        return lines

    def _generate_method(
        self, contract: ContractDef, method: MethodDef, level: int
    ) -> List[str]:
        indent = self._indent(level)
        body = self._indent(level + 1)
        mock_name = self.mock_name(contract)
        prefix = "async " if method.is_async else ""
        returns = method.return_annotation()
        ret_str = f" -> {returns}" if returns else ""
        record_args = ", ".join(f"{p.name}={p.name}" for p in method.params)
        awaiting = "await " if method.is_async else ""

        return [
            f"{indent}{prefix}def {method.name}({method.arglist()}){ret_str}:",
            f"{body}if self.{method.name}_func is None:",
            f"{self._indent(level + 2)}raise RuntimeError(",
            f'{self._indent(level + 3)}"{mock_name}.{method.name}_func is None '
            f'but {contract.name}.{method.name} was just called"',
            f"{self._indent(level + 2)})",
            f"{body}with self._lock:",
            f"{self._indent(level + 2)}self._{method.name}_calls.append(",
            f"{self._indent(level + 3)}{mock_name}.{self.record_name(method)}({record_args})",
            f"{self._indent(level + 2)})",
            f"{body}return {awaiting}self.{method.name}_func({method.call_list()})",
        ]

    def _generate_calls_accessor(
        self, contract: ContractDef, method: MethodDef, level: int
    ) -> List[str]:
        indent = self._indent(level)
        body = self._indent(level + 1)
        record = f"{self.mock_name(contract)}.{self.record_name(method)}"
        return [
            f"{indent}def {method.name}_calls(self) -> typing.List[{record}]:",
            f'{body}"""',
            f"{body}Returns the calls made to {method.name}, oldest first.",
            "",
            f"{body}Check the length with::",
            "",
            f"{body}    len(mocked.{method.name}_calls())",
            f'{body}"""',
            f"{body}with self._lock:",
            f"{self._indent(level + 2)}return list(self._{method.name}_calls)",
        ]

    def _generate_mock(self, contract: ContractDef) -> str:
        if contract.nominal:
            lines = [f"class {self.mock_name(contract)}({contract.reference}):"]
        else:
            lines = [f"class {self.mock_name(contract)}:"]
        lines.extend(self._generate_docstring(contract, 1))

        if not contract.methods:
            return "\n".join(lines)

        for method in contract.methods:
            lines.append("")
            lines.extend(self._generate_record(method, 1))

        lines.append("")
        lines.extend(self._generate_init(contract, 1))

        for method in contract.methods:
            lines.append("")
            lines.extend(self._generate_method(contract, method, 1))
            lines.append("")
            lines.extend(self._generate_calls_accessor(contract, method, 1))

        return "\n".join(lines)
