"""Loaders and lookup catalogs for role-playing game master data tables stored as JSON."""

__version__ = "0.1.0"

__all__ = [
    "bighunt",
    "characterboard",
    "characterviewer",
    "companion",
    "conditions",
    "config",
    "costume",
    "explore",
    "gimmick",
    "lookups",
    "materials",
    "numericalfunc",
    "parts",
    "quest",
    "quest_rows",
    "rebirth",
    "shop",
    "tables",
    "weapon",
]