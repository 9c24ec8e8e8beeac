from typing import List, Sequence, Tuple, Union

import black
import libcst as cst

from pymoq.spec import FormatError

ImportStatement = Union[cst.Import, cst.ImportFrom]

_FUTURE, _ABSOLUTE, _RELATIVE = range(3)


def _import_of(stmt: cst.BaseStatement) -> Union[ImportStatement, None]:
    if isinstance(stmt, cst.SimpleStatementLine) and len(stmt.body) == 1:
        node = stmt.body[0]
        if isinstance(node, (cst.Import, cst.ImportFrom)):
            return node
    return None


def _is_docstring(stmt: cst.BaseStatement) -> bool:
    return (
        isinstance(stmt, cst.SimpleStatementLine)
        and len(stmt.body) == 1
        and isinstance(stmt.body[0], cst.Expr)
        and isinstance(stmt.body[0].value, cst.SimpleString)
    )


class ImportSorter(cst.CSTTransformer):
    """
    Sorts the leading import block into ``__future__``, absolute and relative
    sections, alphabetically within each, separated by one blank line.
    """

    def __init__(self):
        self._module = cst.Module(body=[])

    def _sort_key(self, node: ImportStatement) -> Tuple[int, int, str]:
        if isinstance(node, cst.Import):
            return (_ABSOLUTE, 0, self._module.code_for_node(node.names[0].name))
        name = self._module.code_for_node(node.module) if node.module else ""
        if node.relative:
            dots = "." * len(node.relative)
            return (_RELATIVE, 1, f"{dots}{name}")
        if name == "__future__":
            return (_FUTURE, 1, name)
        return (_ABSOLUTE, 1, name)

    def _sort_block(
        self, block: Sequence[cst.SimpleStatementLine]
    ) -> List[cst.SimpleStatementLine]:
        keyed = sorted(block, key=lambda stmt: self._sort_key(_import_of(stmt)))
        result = []
        previous_section = None
        for stmt in keyed:
            section = self._sort_key(_import_of(stmt))[0]
            blank = [cst.EmptyLine()] if result and section != previous_section else []
            result.append(stmt.with_changes(leading_lines=blank))
            previous_section = section
        return result

    def leave_Module(
        self, original_node: cst.Module, updated_node: cst.Module
    ) -> cst.Module:
        body = list(updated_node.body)
        start = 1 if body and _is_docstring(body[0]) else 0
        end = start
        while end < len(body) and _import_of(body[end]) is not None:
            end += 1
        if end - start < 2:
            return updated_node

        sorted_block = self._sort_block(body[start:end])
        first_leading = body[start].leading_lines
        sorted_block[0] = sorted_block[0].with_changes(leading_lines=first_leading)
        return updated_node.with_changes(
            body=body[:start] + sorted_block + body[end:]
        )


def sort_imports(source: str) -> str:
    try:
        module = cst.parse_module(source)
    except cst.ParserSyntaxError as e:
        raise FormatError(f"generated source is not valid Python: {e}") from e
    return module.visit(ImportSorter()).code


def format_source(source: str, line_length: int = 88) -> str:
    sorted_source = sort_imports(source)
    try:
        formatted = black.format_str(
            sorted_source, mode=black.Mode(line_length=line_length)
        )
    except black.InvalidInput as e:
        raise FormatError(f"cannot format generated source: {e}") from e
    # The parsers accept some code the compiler rejects, e.g. duplicate arguments.
    try:
        compile(formatted, "<generated mock>", "exec")
    except SyntaxError as e:
        raise FormatError(f"generated source does not compile: {e}") from e
    return formatted


class BlackFormatter:
    def __init__(self, line_length: int = 88):
        self.line_length = line_length

    def format(self, source: str) -> str:
        return format_source(source, line_length=self.line_length)
