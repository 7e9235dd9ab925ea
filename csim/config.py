from __future__ import annotations
from dataclasses import dataclass, fields
import yaml
from pathlib import Path

from .errors import ConfigurationError
from .utils.logging import get_logger

ADDRESS_BITS = 64

# Expected types of SimConfig fields settable from YAML; None means "not given"
_OPTIONAL_INT_FIELDS = ("set_bits", "lines_per_set", "block_bits")
_BOOL_FIELDS = ("verbose",)
_STR_FIELDS = ("trace_file", "config_file", "report_dir")

log = get_logger(__name__)


@dataclass(frozen=True)
class CacheGeometry:
    """Immutable cache shape: 2**index_bits sets of `associativity` lines of 2**offset_bits bytes."""
    index_bits: int
    offset_bits: int
    associativity: int

    def __post_init__(self):
        for name in ("index_bits", "offset_bits", "associativity"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.index_bits < 0:
            raise ConfigurationError("Set index bits (-s) must be non-negative.")
        if self.offset_bits < 0:
            raise ConfigurationError("Block offset bits (-b) must be non-negative.")
        if self.associativity <= 0:
            raise ConfigurationError("Lines per set (-E) must be positive.")
        if self.index_bits + self.offset_bits >= ADDRESS_BITS:
            raise ConfigurationError(
                f"Set index bits + block bits must be less than {ADDRESS_BITS}, "
                f"got {self.index_bits} + {self.offset_bits}."
            )

    @property
    def set_count(self) -> int:
        return 1 << self.index_bits

    @property
    def block_bytes(self) -> int:
        return 1 << self.offset_bits

    @property
    def tag_bits(self) -> int:
        return ADDRESS_BITS - self.index_bits - self.offset_bits


@dataclass
class SimConfig:
    """Cache simulator run configuration"""
    # Cache geometry (-s, -E, -b)
    set_bits: int | None = None
    lines_per_set: int | None = None
    block_bits: int | None = None

    # Input
    trace_file: str = ""
    verbose: bool = False

    # Config file
    config_file: str = ""

    # Reporting; empty means console summary only
    report_dir: str = ""

    def geometry(self) -> CacheGeometry:
        """Validates the geometry options and returns the immutable CacheGeometry."""
        missing = [flag for flag, value in (("-s", self.set_bits),
                                            ("-E", self.lines_per_set),
                                            ("-b", self.block_bits)) if value is None]
        if missing:
            raise ConfigurationError(f"Missing required option(s): {', '.join(missing)}")
        return CacheGeometry(index_bits=self.set_bits,
                             offset_bits=self.block_bits,
                             associativity=self.lines_per_set)

    def validate(self) -> CacheGeometry:
        """Full pre-run check, the geometry plus a trace file name."""
        geometry = self.geometry()
        if not self.trace_file:
            raise ConfigurationError("Missing required option: -t <trace>")
        return geometry

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file. Keys that are not config fields are ignored."""
        try:
            with open(yaml_path, 'r') as f:
                yaml_config = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {yaml_path}: {e.strerror or e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {yaml_path} is not valid YAML: {e}") from e
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")

        field_names = {f.name for f in fields(self)}
        for key, value in yaml_config.items():
            if key not in field_names:
                log.warning(f"Ignoring unknown config key {key!r} in {yaml_path}.")
                continue
            _check_field_type(key, value)
            setattr(self, key, value)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                log.warning(f"Config file {config.config_file} not found.")

        # 2. Override with command-line arguments
        field_names = {f.name for f in fields(config)}
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and key in field_names:
                _check_field_type(key, value)
                setattr(config, key, value)

        return config


def _check_field_type(key: str, value):
    """Raises ConfigurationError if `value` has the wrong type for SimConfig field `key`."""
    if key in _OPTIONAL_INT_FIELDS:
        ok = value is None or (isinstance(value, int) and not isinstance(value, bool))
        expected = "an integer"
    elif key in _BOOL_FIELDS:
        ok = isinstance(value, bool)
        expected = "true or false"
    elif key in _STR_FIELDS:
        ok = isinstance(value, str)
        expected = "a string"
    else:
        return
    if not ok:
        raise ConfigurationError(f"Config option {key!r} must be {expected}, got {value!r}")
