"""Unit tests for the application categorizer."""

import pytest
from appdeck.bundles.categorizer import categorize, categorize_folder
from appdeck.models.inventory import ApplicationItem, Category


def _app(name: str, category: Category) -> ApplicationItem:
    return ApplicationItem(name=name, category=category)


class TestCategorize:
    """Tests for categorize()."""

    @pytest.mark.parametrize(
        ("identifier", "name", "expected"),
        [
            ("com.apple.finder", "Finder", Category.SYSTEM),
            ("com.apple.dt.Xcode", "Xcode", Category.SYSTEM),
            ("", "Safari", Category.SYSTEM),
            ("com.microsoft.VSCode", "Visual Studio Code", Category.DEVELOPMENT),
            ("com.googlecode.iterm2", "Terminal Helper", Category.DEVELOPMENT),
            ("com.tinyspeck.slackmacgap", "Slack", Category.PRODUCTIVITY),
            ("com.google.Chrome", "Google Chrome", Category.PRODUCTIVITY),
            ("com.spotify.client", "Spotify", Category.ENTERTAINMENT),
            ("com.valvesoftware.steam", "Steam", Category.ENTERTAINMENT),
            ("org.example.calc", "Calc", Category.UTILITIES),
            ("", "", Category.UTILITIES),
        ],
    )
    def test_rules(self, identifier: str, name: str, expected: Category) -> None:
        """Each rule assigns its category."""
        assert categorize(identifier, name) is expected

    def test_matching_is_case_insensitive(self) -> None:
        """Keywords match regardless of case."""
        assert categorize("COM.APPLE.NEWS", "News") is Category.SYSTEM
        assert categorize("", "DISCORD") is Category.ENTERTAINMENT

    def test_system_wins_over_later_rules(self) -> None:
        """The first matching rule wins."""
        assert categorize("com.apple.Music", "Music") is Category.SYSTEM
        # "mail" (System) beats "teams" (Productivity)
        assert categorize("", "Teams Mail") is Category.SYSTEM

    def test_development_wins_over_productivity(self) -> None:
        """Development is checked before Productivity."""
        assert categorize("", "Terminal for Teams") is Category.DEVELOPMENT

    def test_substring_match(self) -> None:
        """Keywords match anywhere in the name."""
        assert categorize("", "Homebrew Manager") is Category.SYSTEM


class TestCategorizeFolder:
    """Tests for categorize_folder()."""

    @pytest.mark.parametrize(
        ("folder_name", "expected"),
        [
            ("Utilities", Category.UTILITIES),
            ("Dev Tools", Category.UTILITIES),
            ("Games", Category.ENTERTAINMENT),
            ("Developer", Category.DEVELOPMENT),
            ("Office Apps", Category.PRODUCTIVITY),
            ("System Stuff", Category.SYSTEM),
        ],
    )
    def test_folder_name_rules(self, folder_name: str, expected: Category) -> None:
        """Folder-name keywords take precedence over the apps."""
        apps = [_app("Spotify", Category.ENTERTAINMENT)]
        if expected is Category.ENTERTAINMENT:
            apps = [_app("Slack", Category.PRODUCTIVITY)]
        assert categorize_folder(folder_name, apps) is expected

    def test_mode_of_app_categories(self) -> None:
        """Without a name match the most common category wins."""
        apps = [
            _app("A", Category.ENTERTAINMENT),
            _app("B", Category.DEVELOPMENT),
            _app("C", Category.DEVELOPMENT),
        ]
        assert categorize_folder("Stuff", apps) is Category.DEVELOPMENT

    def test_tie_prefers_first_appearance(self) -> None:
        """Ties go to the category that appears first."""
        apps = [
            _app("A", Category.ENTERTAINMENT),
            _app("B", Category.DEVELOPMENT),
            _app("C", Category.DEVELOPMENT),
            _app("D", Category.ENTERTAINMENT),
        ]
        assert categorize_folder("Stuff", apps) is Category.ENTERTAINMENT

    def test_single_app(self) -> None:
        """A lone app decides the folder category."""
        apps = [_app("X", Category.PRODUCTIVITY)]
        assert categorize_folder("Adobe", apps) is Category.PRODUCTIVITY

    def test_empty_apps_raise(self) -> None:
        """Empty folders without a name match cannot be categorized."""
        with pytest.raises(ValueError, match="empty folder"):
            categorize_folder("Stuff", [])
