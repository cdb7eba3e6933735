"""Core crudsmith functionality: IR, types reader, configuration, backups and state."""

from . import ir
from .config import CrudsmithConfig, load_config
from .errors import (
    BuildError,
    ConfigError,
    CrudsmithError,
    ErrorContext,
    GenerationError,
    ParseError,
    PatchError,
)
from .types_parser import extract_data_arrays, parse_types, parse_types_file

__all__ = [
    "ir",
    "CrudsmithConfig",
    "load_config",
    "CrudsmithError",
    "ParseError",
    "GenerationError",
    "PatchError",
    "BuildError",
    "ConfigError",
    "ErrorContext",
    "parse_types",
    "parse_types_file",
    "extract_data_arrays",
]
