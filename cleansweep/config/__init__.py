"""Configuration module for CleanSweep."""

from .settings import (
    Config,
    ScanConfig,
    ExtractionConfig,
    OrganizationConfig,
    DEFAULT_CONFIG_PATH,
)
from .categories import FileCategory, ImageSubcategory, CategoryMapping, CATEGORY_MAPPING

__all__ = [
    "Config",
    "ScanConfig",
    "ExtractionConfig",
    "OrganizationConfig",
    "DEFAULT_CONFIG_PATH",
    "FileCategory",
    "ImageSubcategory",
    "CategoryMapping",
    "CATEGORY_MAPPING",
]
