from pymoq.config import MoqConfig, load_config_from_path
from pymoq.config.loader import DEFAULT_MOCK_SUFFIX, DEFAULT_TEST_MARKERS


def test_defaults_without_pyproject(tmp_path):
    config = load_config_from_path(tmp_path)

    assert config.config_path is None
    assert config == MoqConfig()


def test_tool_table_is_read_from_the_nearest_pyproject(workspace_factory):
    root = (
        workspace_factory.with_config(
            {
                "search_paths": ["src"],
                "mock_suffix": "_fake.py",
                "line_length": 100,
                "test_markers": ["spec_"],
            }
        )
        .with_package("src/shop")
        .build()
    )

    config = load_config_from_path(root / "src" / "shop")

    assert config.config_path == (root / "pyproject.toml").resolve()
    assert config.search_paths == [(root / "src").resolve()]
    assert config.mock_suffix == "_fake.py"
    assert config.line_length == 100
    assert config.test_markers == ("spec_",)


def test_missing_keys_use_defaults(workspace_factory):
    root = workspace_factory.with_project_name("shop").build()

    config = load_config_from_path(root)

    assert config.search_paths == []
    assert config.mock_suffix == DEFAULT_MOCK_SUFFIX
    assert config.test_markers == DEFAULT_TEST_MARKERS
