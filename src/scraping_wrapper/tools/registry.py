"""
Element Registry

Immutable mapping from symbolic element names to CSS selectors.
"""

from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ..errors import SelectorLookupError


class ElementRegistry(Mapping[str, str]):
    """
    Read-only name -> selector table fixed at construction.

    Lookups are plain local map accesses and are never retried. A missing
    name raises SelectorLookupError; there is no fallback selector.
    """

    def __init__(self, selectors: Optional[Mapping[str, str]] = None):
        self._selectors = MappingProxyType(dict(selectors or {}))

    def lookup(self, name: str) -> str:
        """
        Get the selector registered for ``name``.

        Raises:
            SelectorLookupError: If the name is not registered
        """
        try:
            return self._selectors[name]
        except KeyError:
            raise SelectorLookupError(name) from None

    def __getitem__(self, name: str) -> str:
        return self.lookup(name)

    # Mapping's mixins expect KeyError from __getitem__
    def __contains__(self, name: object) -> bool:
        return name in self._selectors

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._selectors.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._selectors)

    def __len__(self) -> int:
        return len(self._selectors)

    def __repr__(self) -> str:
        return f"ElementRegistry({dict(self._selectors)!r})"
