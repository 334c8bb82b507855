"""Rule-based application categorizer.

Categories are assigned by case-insensitive substring matching against
fixed keyword tuples. Rules are evaluated in a fixed priority order and
the first match wins, so an application whose name hits several lists
lands in the earliest one.
"""

from collections.abc import Sequence

from appdeck.models.inventory import ApplicationItem, Category

# Identifier fragments that mark an application as part of the OS
SYSTEM_IDENTIFIER_KEYWORDS: tuple[str, ...] = ("com.apple",)

SYSTEM_NAME_KEYWORDS: tuple[str, ...] = (
    "finder",
    "safari",
    "mail",
    "messages",
    "facetime",
    "photos",
    "music",
    "calendar",
    "notes",
    "maps",
    "weather",
    "calculator",
    "preview",
    "textedit",
    "quicktime",
    "app store",
    "dictionary",
    "stocks",
    "voice memos",
    "home",
    "shortcuts",
)

DEVELOPMENT_NAME_KEYWORDS: tuple[str, ...] = (
    "xcode",
    "terminal",
    "visual studio",
    "android studio",
    "intellij",
    "sublime",
    "vscode",
    "atom",
    "vim",
    "emacs",
)

PRODUCTIVITY_NAME_KEYWORDS: tuple[str, ...] = (
    "microsoft word",
    "microsoft excel",
    "microsoft powerpoint",
    "google chrome",
    "firefox",
    "slack",
    "zoom",
    "teams",
    "notion",
    "evernote",
    "trello",
    "asana",
)

ENTERTAINMENT_NAME_KEYWORDS: tuple[str, ...] = (
    "spotify",
    "netflix",
    "youtube",
    "disney",
    "steam",
    "discord",
    "twitch",
    "instagram",
    "facebook",
    "twitter",
)

# Ordered (category, name keywords) rules checked after the system rule
_NAME_RULES: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.DEVELOPMENT, DEVELOPMENT_NAME_KEYWORDS),
    (Category.PRODUCTIVITY, PRODUCTIVITY_NAME_KEYWORDS),
    (Category.ENTERTAINMENT, ENTERTAINMENT_NAME_KEYWORDS),
)

# Ordered folder-name rules
FOLDER_NAME_RULES: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.UTILITIES, ("utilities", "tools")),
    (Category.ENTERTAINMENT, ("game", "entertainment")),
    (Category.DEVELOPMENT, ("develop", "dev", "code")),
    (Category.PRODUCTIVITY, ("product", "office")),
    (Category.SYSTEM, ("system",)),
)


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def categorize(identifier: str, name: str) -> Category:
    """Assign a category to an application.

    Rules are checked in the order System, Development, Productivity,
    Entertainment; anything unmatched is Utilities.

    Args:
        identifier: Reverse-domain bundle identifier (may be empty).
        name: Display name of the application.

    Returns:
        The first matching Category.
    """
    lowered_name = name.lower()
    lowered_identifier = identifier.lower()

    if _contains_any(lowered_identifier, SYSTEM_IDENTIFIER_KEYWORDS) or _contains_any(
        lowered_name, SYSTEM_NAME_KEYWORDS
    ):
        return Category.SYSTEM

    for category, keywords in _NAME_RULES:
        if _contains_any(lowered_name, keywords):
            return category

    return Category.UTILITIES


def categorize_folder(folder_name: str, apps: Sequence[ApplicationItem]) -> Category:
    """Assign a category to a folder of applications.

    Folder-name keywords take precedence. Otherwise the most common
    category among ``apps`` wins; on a tie the category that appeared
    first among ``apps`` is chosen.

    Args:
        folder_name: Base name of the folder.
        apps: Applications contained in the folder.

    Returns:
        Category for the folder.

    Raises:
        ValueError: If ``apps`` is empty and no folder-name rule matches.
    """
    lowered = folder_name.lower()
    for category, keywords in FOLDER_NAME_RULES:
        if _contains_any(lowered, keywords):
            return category

    if not apps:
        msg = f"Cannot derive a category for empty folder '{folder_name}'"
        raise ValueError(msg)

    # Insertion order of the dict is first-appearance order
    counts: dict[Category, int] = {}
    for app in apps:
        counts[app.category] = counts.get(app.category, 0) + 1

    best = apps[0].category
    best_count = 0
    for category, count in counts.items():
        if count > best_count:
            best, best_count = category, count
    return best
