# metal_client/__init__.py
from .config import ClientConfig, Settings
from .client import Metal
from .motorhead import Motorhead
from .files import InMemoryFile, SUPPORTED_FILE_TYPES
from .log import configure_logging
from . import models
from . import exceptions

__all__ = [
    "ClientConfig",
    "Settings",
    "Metal",
    "Motorhead",
    "InMemoryFile",
    "SUPPORTED_FILE_TYPES",
    "configure_logging",
    "models",
    "exceptions",
]
