"""
Configuration Management System
===============================

Provides dataclass-based configuration with YAML file loading support.
All settings are validated and have sensible defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any, Dict
import yaml

from cleansweep.utils.exceptions import ConfigurationError
from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_HOME = Path.home() / ".cleansweep"
DEFAULT_CONFIG_PATH = DEFAULT_HOME / "config.yaml"


def _optional_int(value: Any, key: str) -> Optional[int]:
    """Parse an optional non-negative integer; 0 and None both mean unset."""
    if value is None:
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid value for {key}: {value!r}",
            config_key=key,
            expected_type="int",
            cause=e
        )
    if parsed < 0:
        raise ConfigurationError(
            f"{key} must be non-negative",
            config_key=key,
            expected_type="int"
        )
    return parsed or None


def _folder_name(value: Any, key: str) -> str:
    """Validate a single path segment used as a folder name."""
    name = str(value).strip()
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise ConfigurationError(
            f"{key} must be a plain folder name, got {value!r}",
            config_key=key,
            expected_type="folder name"
        )
    return name


@dataclass
class ScanConfig:
    """Folder listing configuration.

    Attributes:
        reserved_folder_name: Output folder skipped while listing.
        skip_hidden: Skip entries whose name starts with a dot.
    """
    reserved_folder_name: str = "CleanUp"
    skip_hidden: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        """Create ScanConfig from dictionary."""
        if not data:
            return cls()
        return cls(
            reserved_folder_name=_folder_name(
                data.get("reserved_folder_name", cls.reserved_folder_name),
                "scan.reserved_folder_name"
            ),
            skip_hidden=bool(data.get("skip_hidden", cls.skip_hidden))
        )


@dataclass
class ExtractionConfig:
    """Metadata extraction configuration.

    Attributes:
        max_full_read_bytes: Cap for the whole-file reads done by the PDF,
            Office and legacy Office sniffers. None reads the entire file.
        decompress_office: Also inflate the XML parts of Office Open XML
            containers instead of scanning only the raw archive bytes.
    """
    max_full_read_bytes: Optional[int] = None
    decompress_office: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractionConfig":
        """Create ExtractionConfig from dictionary."""
        if not data:
            return cls()
        return cls(
            max_full_read_bytes=_optional_int(
                data.get("max_full_read_bytes"), "extraction.max_full_read_bytes"
            ),
            decompress_office=bool(data.get("decompress_office", cls.decompress_office))
        )


@dataclass
class OrganizationConfig:
    """Sweep settings.

    Attributes:
        output_folder_name: Folder created inside the sweep destination.
        log_folder_name: Folder name hidden from subfolder listings.
        copy_mode: Copy files instead of moving them.
        use_subcategories: Nest files under a subcategory folder.
        log_directory: Where sweep logs are stored.
    """
    output_folder_name: str = "CleanUp"
    log_folder_name: str = "CleanUpLog"
    copy_mode: bool = False
    use_subcategories: bool = True
    log_directory: Path = field(default_factory=lambda: DEFAULT_HOME / "sweeps")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrganizationConfig":
        """Create OrganizationConfig from dictionary."""
        if not data:
            return cls()

        log_dir = data.get("log_directory")
        return cls(
            output_folder_name=_folder_name(
                data.get("output_folder_name", cls.output_folder_name),
                "organization.output_folder_name"
            ),
            log_folder_name=_folder_name(
                data.get("log_folder_name", cls.log_folder_name),
                "organization.log_folder_name"
            ),
            copy_mode=bool(data.get("copy_mode", cls.copy_mode)),
            use_subcategories=bool(data.get("use_subcategories", cls.use_subcategories)),
            log_directory=Path(log_dir).expanduser() if log_dir else DEFAULT_HOME / "sweeps"
        )


@dataclass
class Config:
    """Main configuration container.

    Aggregates all configuration sections and provides loading from YAML.
    """
    scan: ScanConfig = field(default_factory=ScanConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    organization: OrganizationConfig = field(default_factory=OrganizationConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file.

        Args:
            config_path: Path to the configuration file. If None, uses
                        ~/.cleansweep/config.yaml.

        Returns:
            Config instance with loaded settings.

        Raises:
            ConfigurationError: If the file is not valid YAML or holds
                        invalid values.
        """
        explicit = config_path is not None
        config_path = Path(config_path) if explicit else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            # only a path the user named is worth a warning
            log = logger.warning if explicit else logger.info
            log(f"Config file not found at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise ConfigurationError(
                f"Invalid YAML in {config_path}",
                cause=e
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Top level of {config_path} must be a mapping",
                expected_type="mapping"
            )

        logger.info(f"Loaded configuration from {config_path}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(
            scan=ScanConfig.from_dict(data.get("scan", {})),
            extraction=ExtractionConfig.from_dict(data.get("extraction", {})),
            organization=OrganizationConfig.from_dict(data.get("organization", {}))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a YAML-friendly dictionary."""
        return {
            "scan": {
                "reserved_folder_name": self.scan.reserved_folder_name,
                "skip_hidden": self.scan.skip_hidden
            },
            "extraction": {
                "max_full_read_bytes": self.extraction.max_full_read_bytes,
                "decompress_office": self.extraction.decompress_office
            },
            "organization": {
                "output_folder_name": self.organization.output_folder_name,
                "log_folder_name": self.organization.log_folder_name,
                "copy_mode": self.organization.copy_mode,
                "use_subcategories": self.organization.use_subcategories,
                "log_directory": str(self.organization.log_directory)
            }
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path where to save the configuration.
        """
        config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved configuration to {config_path}")
