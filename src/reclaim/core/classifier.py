"""Name-based classification of temporary directories."""

from __future__ import annotations

from types import MappingProxyType

from reclaim.models.entry import EntryType

# Matched against the bare directory name, case-sensitive, whole name only.
CATALOG = MappingProxyType({
    "javascript": frozenset({
        "node_modules", ".npm", ".yarn", ".pnpm-store", ".turbo", ".parcel-cache",
        ".webpack", ".rollup.cache", ".vite", ".next", ".nuxt", ".output",
        ".vercel", ".netlify", "bower_components",
    }),
    "python": frozenset({
        ".venv", "venv", "env", ".env", "__pycache__", ".pytest_cache",
        ".mypy_cache", ".tox", ".eggs", ".ipynb_checkpoints",
    }),
    "rust": frozenset({"target", ".fingerprint", ".cargo"}),
    "build": frozenset({"dist", "build", "out", ".build", "_build", ".gradle", ".mvn"}),
    "cache": frozenset({".cache", "cache", ".tmp", "tmp", "temp", ".temp"}),
    "version_manager": frozenset({".nvm", ".rvm", ".rbenv", ".pyenv"}),
    "ide": frozenset({".idea", ".vscode", ".vs", ".eclipse", ".settings"}),
    "os": frozenset({".DS_Store", "Thumbs.db", ".Trash"}),
    "other": frozenset({
        "coverage", ".coverage", ".nyc_output", "htmlcov", ".sass-cache", ".docusaurus",
    }),
})

TEMP_DIRECTORY_NAMES: frozenset[str] = frozenset().union(*CATALOG.values())

_CATEGORY_BY_NAME = MappingProxyType({
    name: category for category, names in CATALOG.items() for name in names
})


def is_temp_directory(name: str) -> bool:
    """Check whether *name* is a well-known regenerable directory name."""
    return name in TEMP_DIRECTORY_NAMES


def classify(name: str) -> EntryType:
    """Classify a directory by its bare name."""
    return EntryType.TEMP if name in TEMP_DIRECTORY_NAMES else EntryType.NORMAL


def category_for(name: str) -> str | None:
    """Catalog category of a temporary directory name, e.g. 'python'."""
    return _CATEGORY_BY_NAME.get(name)
