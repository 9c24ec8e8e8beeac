from .core import Mocker

__all__ = ["Mocker"]
