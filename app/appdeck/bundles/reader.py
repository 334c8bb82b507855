"""Application bundle metadata reader.

Reads the display name, bundle identifier and icon location from a
single ``.app`` bundle. Metadata lives in ``Contents/Info.plist`` with
optional per-language overrides in
``Contents/Resources/<lang>.lproj/InfoPlist.strings``.
"""

import codecs
import logging
import plistlib
import re
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from appdeck.bundles.categorizer import categorize
from appdeck.models.inventory import BUNDLE_SUFFIX, ApplicationItem, Category

logger = logging.getLogger(__name__)

DEFAULT_LOCALIZATIONS: tuple[str, ...] = ("en", "English", "Base")

# Text-format strings file entry: "key" = "value";
_STRINGS_ENTRY_RE = re.compile(
    r'^\s*"?(?P<key>[A-Za-z0-9_.\-]+)"?\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*;',
    re.MULTILINE,
)
_STRINGS_ESCAPES = {'\\"': '"', "\\\\": "\\", "\\n": "\n", "\\t": "\t"}


def _unescape(value: str) -> str:
    return re.sub(r"\\[\"\\nt]", lambda m: _STRINGS_ESCAPES[m.group(0)], value)


def _string_value(data: dict[str, Any], key: str) -> str | None:
    """Return a non-blank string value from plist data, else None."""
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_strings_file(raw: bytes) -> dict[str, str]:
    """Parse the contents of an ``InfoPlist.strings`` file.

    Accepts binary and XML property lists as well as the text
    ``"key" = "value";`` format in UTF-8 or UTF-16.

    Args:
        raw: File contents.

    Returns:
        Mapping of keys to string values (empty if nothing parseable).
    """
    if raw.startswith((b"bplist", b"<?xml", b"<plist")):
        try:
            data = plistlib.loads(raw)
        except (plistlib.InvalidFileException, ValueError) as e:
            logger.debug("Unreadable strings plist: %s", e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        encoding = "utf-16"
    else:
        encoding = "utf-8-sig"
    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError:
        return {}

    return {m.group("key"): _unescape(m.group("value")) for m in _STRINGS_ENTRY_RE.finditer(text)}


def is_bundle_path(path: Path) -> bool:
    """Check whether a path looks like an application bundle.

    Args:
        path: Filesystem path to check.

    Returns:
        True if the path is a directory whose name ends in ``.app``.
    """
    return path.name.endswith(BUNDLE_SUFFIX) and path.is_dir()


class BundleReader:
    """Reads application metadata from ``.app`` bundles.

    The reader is side-effect free; every call re-reads metadata from
    disk. Unreadable bundles are excluded, never raised.

    Args:
        preferred_localizations: ``.lproj`` names consulted, in order,
            for a localized display name.
        categorizer: Function mapping (identifier, name) to a Category.
    """

    def __init__(
        self,
        *,
        preferred_localizations: Sequence[str] = DEFAULT_LOCALIZATIONS,
        categorizer: Callable[[str, str], Category] = categorize,
    ) -> None:
        self._localizations = tuple(preferred_localizations)
        self._categorize = categorizer

    def read(self, path: Path | str) -> ApplicationItem | None:
        """Build an ApplicationItem for a bundle path.

        Name precedence is fixed: localized display name, then the
        Info.plist display name, then the internal bundle name, then the
        directory name with the ``.app`` suffix removed.

        Args:
            path: Path believed to be an application bundle.

        Returns:
            ApplicationItem, or None if the path cannot be opened as a bundle.
        """
        bundle = Path(path)
        if not is_bundle_path(bundle):
            logger.debug("Not an application bundle: %s", bundle)
            return None

        info = self.read_info(bundle)
        name = (
            self.localized_display_name(bundle)
            or _string_value(info, "CFBundleDisplayName")
            or _string_value(info, "CFBundleName")
            or bundle.name.removesuffix(BUNDLE_SUFFIX)
        )
        if not name:
            logger.debug("Bundle has no usable name: %s", bundle)
            return None

        identifier = _string_value(info, "CFBundleIdentifier") or ""
        return ApplicationItem(
            name=name,
            category=self._categorize(identifier, name),
            identifier=identifier,
            path=str(bundle.absolute()),
        )

    def read_info(self, bundle: Path) -> dict[str, Any]:
        """Load ``Contents/Info.plist`` of a bundle.

        Args:
            bundle: Bundle directory.

        Returns:
            Parsed Info.plist dictionary, or an empty dict if it is
            missing or cannot be parsed.
        """
        info_plist = bundle / "Contents" / "Info.plist"
        try:
            with info_plist.open("rb") as f:
                data = plistlib.load(f)
        except FileNotFoundError:
            return {}
        except (plistlib.InvalidFileException, ValueError, OSError) as e:
            logger.debug("Cannot read %s: %s", info_plist, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def localized_display_name(self, bundle: Path) -> str | None:
        """Find the localized display name of a bundle.

        Args:
            bundle: Bundle directory.

        Returns:
            Localized CFBundleDisplayName (or CFBundleName) from the first
            preferred localization that defines one, else None.
        """
        resources = bundle / "Contents" / "Resources"
        for localization in self._localizations:
            strings_file = resources / f"{localization}.lproj" / "InfoPlist.strings"
            try:
                raw = strings_file.read_bytes()
            except OSError:
                continue
            strings = parse_strings_file(raw)
            name = _string_value(strings, "CFBundleDisplayName") or _string_value(
                strings, "CFBundleName"
            )
            if name:
                return name
        return None

    def icon_path(self, path: Path | str) -> Path | None:
        """Resolve the icon file declared by a bundle.

        Args:
            path: Bundle directory.

        Returns:
            Path to the ``.icns`` file, or None if none is declared or
            the file does not exist.
        """
        bundle = Path(path)
        icon_name = _string_value(self.read_info(bundle), "CFBundleIconFile")
        if icon_name is None:
            return None
        if not Path(icon_name).suffix:
            icon_name = f"{icon_name}.icns"
        icon = bundle / "Contents" / "Resources" / icon_name
        return icon if icon.is_file() else None
