"""
Generation configuration.

A GenerationConfig is immutable for the duration of a run. Values come from
defaults, an optional JSON config file and command-line flags, in increasing
order of priority.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigError
from .resolver import Precedence, is_valid_identifier


DEFAULT_PACKAGE_NAME = '@socket-rpc/rpc'
DEFAULT_TIMEOUT_MS = 5000
DEFAULT_LOGGER_EXPORT = 'logError'

# camelCase keys accepted in the JSON config file
CONFIG_FILE_KEYS: Dict[str, str] = {
    'inputPath': 'input_path',
    'outputDir': 'output_dir',
    'packageName': 'package_name',
    'defaultTimeout': 'default_timeout',
    'errorLogger': 'error_logger',
    'autoCleanup': 'auto_cleanup',
    'emitFactory': 'emit_factory',
    'precedence': 'precedence',
    'serverContract': 'server_contract',
    'clientContract': 'client_contract',
    'clientTransport': 'client_transport_module',
    'serverTransport': 'server_transport_module',
}


@dataclass(frozen=True)
class GenerationConfig:
    """Settings for one generation run."""
    input_path: Path
    output_dir: Optional[Path] = None
    package_name: str = DEFAULT_PACKAGE_NAME
    default_timeout: int = DEFAULT_TIMEOUT_MS
    error_logger: Optional[str] = None
    auto_cleanup: bool = False
    emit_factory: bool = True
    precedence: Precedence = Precedence.DESCENDANT
    server_contract: str = 'ServerFunctions'
    client_contract: str = 'ClientFunctions'
    client_transport_module: str = 'socket.io-client'
    server_transport_module: str = 'socket.io'

    def __post_init__(self):
        # Normalize loosely-typed inputs (JSON, argparse) in place
        object.__setattr__(self, 'input_path', Path(self.input_path))
        if self.output_dir is not None:
            object.__setattr__(self, 'output_dir', Path(self.output_dir))
        if not isinstance(self.precedence, Precedence):
            try:
                object.__setattr__(self, 'precedence', Precedence(self.precedence))
            except ValueError:
                raise ConfigError(
                    f'Invalid precedence "{self.precedence}"; '
                    f'expected one of: {", ".join(p.value for p in Precedence)}'
                )
        if isinstance(self.default_timeout, bool) or not isinstance(self.default_timeout, int) \
                or self.default_timeout < 0:
            raise ConfigError(f'Invalid default timeout {self.default_timeout!r}; expected milliseconds >= 0')
        if not self.package_name:
            raise ConfigError('Package name must not be empty')
        if self.error_logger is not None:
            parse_error_logger(self.error_logger)

    @property
    def resolved_output_dir(self) -> Path:
        """The output directory, defaulting to the input file's directory."""
        if self.output_dir is not None:
            return self.output_dir
        return self.input_path.parent

    @property
    def logger_import(self) -> Optional[Tuple[str, str]]:
        """(module, export name) of the configured error logger."""
        if self.error_logger is None:
            return None
        return parse_error_logger(self.error_logger)


def parse_error_logger(reference: str) -> Tuple[str, str]:
    """
    Parse an error logger reference.

    'module' imports the default export name (logError) from module;
    'module#name' imports name.
    """
    module, _, name = reference.partition('#')
    module = module.strip()
    name = name.strip() or DEFAULT_LOGGER_EXPORT
    if not module:
        raise ConfigError(f'Invalid error logger "{reference}": missing module')
    if not is_valid_identifier(name):
        raise ConfigError(f'Invalid error logger "{reference}": "{name}" is not an identifier')
    return module, name


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON config file into GenerationConfig keyword arguments.

    Relative paths inside the file are resolved against the file's own
    directory.
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigError(f'Could not read config file {path}: {e}')
    except json.JSONDecodeError as e:
        raise ConfigError(f'Invalid JSON in config file {path}: {e}')

    if not isinstance(raw, dict):
        raise ConfigError(f'Config file {path} must contain a JSON object')

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in CONFIG_FILE_KEYS:
            raise ConfigError(
                f'Unknown key "{key}" in config file {path}; '
                f'expected one of: {", ".join(sorted(CONFIG_FILE_KEYS))}'
            )
        values[CONFIG_FILE_KEYS[key]] = value

    for key in ('input_path', 'output_dir'):
        if values.get(key) is not None:
            values[key] = path.parent / values[key]
    return values


def build_config(input_path: Optional[Path] = None, config_file: Optional[Path] = None,
                 **overrides: Any) -> GenerationConfig:
    """Combine defaults, an optional config file and explicit overrides."""
    values: Dict[str, Any] = {}
    if config_file is not None:
        values.update(load_config_file(config_file))
    if input_path is not None:
        values['input_path'] = input_path
    if 'input_path' not in values:
        raise ConfigError('No input file given')

    known = {f.name for f in fields(GenerationConfig)}
    for key, value in overrides.items():
        if key not in known:
            raise ConfigError(f'Unknown option "{key}"')
        if value is not None:
            values[key] = value
    return GenerationConfig(**values)
