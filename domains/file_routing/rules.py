"""
Extension index for the File Routing domain.

Flattens the ordered rule list into a lookup from lowercased extension to
destination directory.
"""

import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from loguru import logger

from app.models.schemas import Rule
from app.utils.helpers import normalise_extension


class ExtensionIndex:
    """Read-only lookup from file extension to destination directory."""

    def __init__(self, mapping: Dict[str, Path]):
        self._mapping = dict(mapping)

    @classmethod
    def build(cls, rules: Iterable[Rule]) -> "ExtensionIndex":
        """
        Build an index from rules in order.

        A later rule claiming an extension already claimed replaces the
        earlier destination.

        Args:
            rules: Ordered rules

        Returns:
            ExtensionIndex
        """
        mapping: Dict[str, Path] = {}

        for rule in rules:
            for extension in rule.extensions:
                key = normalise_extension(extension)
                previous = mapping.get(key)
                if previous is not None and previous != rule.destination:
                    logger.debug(
                        f"Extension {key} reassigned: {previous} -> {rule.destination}"
                    )
                mapping[key] = rule.destination

        return cls(mapping)

    def lookup(self, extension: str) -> Optional[Path]:
        """Return the destination for ``extension`` or None."""
        return self._mapping.get(normalise_extension(extension))

    @property
    def mapping(self) -> Mapping[str, Path]:
        return MappingProxyType(self._mapping)

    def __contains__(self, extension: str) -> bool:
        return normalise_extension(extension) in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)


def ensure_destination_dirs(rules: Iterable[Rule], mode: int = 0o755) -> List[Path]:
    """
    Create every rule destination that does not exist yet.

    Failures are logged and skipped.

    Args:
        rules: Configured rules
        mode: Permission bits for created directories

    Returns:
        Destinations that could not be created
    """
    failed: List[Path] = []

    for rule in rules:
        try:
            os.makedirs(rule.destination, mode=mode, exist_ok=True)
        except OSError as e:
            logger.warning(f"Failed to create directory {rule.destination}: {e}")
            failed.append(rule.destination)

    return failed
