"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import plistlib
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

BundleFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and cache directories at a per-test location."""
    xdg_root = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg_root / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(xdg_root / "cache"))
    return xdg_root


@pytest.fixture
def make_bundle() -> BundleFactory:
    """Factory creating fake ``.app`` bundles on disk.

    Keyword arguments map to Info.plist keys; ``localized`` writes an
    ``en.lproj/InfoPlist.strings`` file and ``icon`` writes a PNG icon.
    """

    def factory(
        parent: Path,
        dirname: str,
        *,
        display_name: str | None = None,
        bundle_name: str | None = None,
        identifier: str | None = None,
        localized: str | None = None,
        icon: bool = False,
        info_plist: bool = True,
    ) -> Path:
        bundle = parent / dirname
        contents = bundle / "Contents"
        resources = contents / "Resources"
        resources.mkdir(parents=True)

        info: dict[str, str] = {}
        if display_name is not None:
            info["CFBundleDisplayName"] = display_name
        if bundle_name is not None:
            info["CFBundleName"] = bundle_name
        if identifier is not None:
            info["CFBundleIdentifier"] = identifier
        if icon:
            info["CFBundleIconFile"] = "AppIcon.png"
            Image.new("RGBA", (256, 256), (200, 30, 30, 255)).save(resources / "AppIcon.png")

        if info_plist:
            with (contents / "Info.plist").open("wb") as f:
                plistlib.dump(info, f)

        if localized is not None:
            lproj = resources / "en.lproj"
            lproj.mkdir()
            (lproj / "InfoPlist.strings").write_text(
                f'/* Localized */\n"CFBundleDisplayName" = "{localized}";\n',
                encoding="utf-8",
            )
        return bundle

    return factory


@pytest.fixture
def sample_roots(tmp_path: Path, make_bundle: BundleFactory) -> tuple[Path, ...]:
    """Three application roots: Finder plus a Utils folder holding Calc."""
    system = tmp_path / "System" / "Applications"
    apps = tmp_path / "Applications"
    user = tmp_path / "home" / "Applications"
    for root in (system, apps, user):
        root.mkdir(parents=True)

    make_bundle(system, "Finder.app", identifier="com.apple.finder")
    utils = system / "Utils"
    utils.mkdir()
    make_bundle(utils, "Calc.app", identifier="org.example.calc")
    return system, apps, user
