from .loader import DEFAULT_MOCK_SUFFIX, MoqConfig, load_config_from_path

__all__ = ["DEFAULT_MOCK_SUFFIX", "MoqConfig", "load_config_from_path"]
