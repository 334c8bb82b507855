"""Application bundle reading and categorization."""

from appdeck.bundles.categorizer import categorize, categorize_folder
from appdeck.bundles.reader import BundleReader, is_bundle_path, parse_strings_file

__all__ = [
    "BundleReader",
    "categorize",
    "categorize_folder",
    "is_bundle_path",
    "parse_strings_file",
]
