import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from pymoq.common import TransactionManager, bus
from pymoq.config import MoqConfig, load_config_from_path
from pymoq.generator import BlackFormatter, MockGenerator
from pymoq.lang.python import (
    ImportQualifier,
    SignatureExtractor,
    load_symbols,
    resolve_source,
)
from pymoq.spec import (
    FileSystemAdapter,
    FormatterProtocol,
    MockDocument,
    MockRendererProtocol,
    MustSpecifyInterface,
)


class Mocker:
    """
    Generates mocks for the contracts of one package directory.

    The package is resolved when the Mocker is created; loading, extraction,
    rendering and formatting happen on every call to :meth:`mock`, which
    either returns the complete document or raises before anything is
    written.
    """

    def __init__(
        self,
        src: Path,
        package_name: Optional[str] = None,
        config: Optional[MoqConfig] = None,
        generator: Optional[MockRendererProtocol] = None,
        formatter: Optional[FormatterProtocol] = None,
        fs: Optional[FileSystemAdapter] = None,
    ):
        self.src = Path(src)
        self.config = config or load_config_from_path(self.src)
        self.descriptor = resolve_source(
            self.src,
            package_name,
            search_paths=self.config.search_paths,
            test_markers=self.config.test_markers,
        )
        bus.debug(
            "resolve.package",
            name=self.descriptor.package_name,
            path=self.descriptor.import_path,
        )
        self.generator = generator or MockGenerator()
        self.formatter = formatter or BlackFormatter(self.config.line_length)
        self.fs = fs

    def mock(self, *names: str) -> str:
        if not names:
            raise MustSpecifyInterface()

        bus.debug(
            "load.start", path=self.descriptor.import_path, root=self.descriptor.root
        )
        symbols = load_symbols(
            self.descriptor,
            search_paths=self.config.search_paths,
            test_markers=self.config.test_markers,
        )
        if symbols.unresolved:
            bus.debug("load.unresolved", count=symbols.unresolved)

        qualifier = ImportQualifier(symbols, self.descriptor.target_path)
        contracts = SignatureExtractor(symbols, qualifier).extract(names)
        for contract in contracts:
            bus.debug("generate.contract", name=contract.name, count=len(contract.methods))

        document = MockDocument(
            package_name=self.descriptor.package_name,
            contracts=contracts,
            imports=qualifier.imports,
        )
        return self.formatter.format(self.generator.generate(document))

    def stale_mocks(self, directory: Path) -> List[Path]:
        return sorted(
            path
            for path in directory.glob(f"*{self.config.mock_suffix}")
            if path.is_file()
        )

    def write(
        self,
        names: Sequence[str],
        out: Optional[Path] = None,
        stream: Optional[TextIO] = None,
    ) -> Optional[Path]:
        content = self.mock(*names)

        if out is None:
            (stream or sys.stdout).write(content)
            return None

        out = Path(out).resolve()
        directory = out.parent
        stale = self.stale_mocks(directory) if directory.is_dir() else []

        tm = TransactionManager(directory, self.fs)
        for path in stale:
            tm.add_delete_file(path.name)
        tm.add_write(out.name, content)
        tm.commit()

        for path in stale:
            if path != out:
                bus.info("generate.stale.removed", path=path)
        bus.success("generate.file.success", path=out)
        return out
