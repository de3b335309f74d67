"""Group lookup used to resolve group names found in vendor extensions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping

from gwimport.models import GroupRef


class GroupLookup(ABC):
    """Resolves a group name into the groups registered under that name."""

    @abstractmethod
    def find_groups_by_name(self, name: str) -> list[GroupRef]:
        """Return every group named *name*; an empty list when none matches."""


class StaticGroupLookup(GroupLookup):
    """A :class:`GroupLookup` backed by a fixed name -> ids mapping.

    The mapping usually comes from
    :attr:`~gwimport.models.ImportSettings.groups`. It is copied at
    construction and never mutated, so one instance can serve concurrent
    imports.

    Example::

        lookup = StaticGroupLookup({"group1": ["7f3a"]})
        lookup.find_groups_by_name("group1")  # [GroupRef(id="7f3a", name="group1")]
    """

    def __init__(self, groups: Mapping[str, list[str]] | None = None) -> None:
        self._groups = {name: list(ids) for name, ids in (groups or {}).items()}

    def find_groups_by_name(self, name: str) -> list[GroupRef]:
        return [GroupRef(id=group_id, name=name) for group_id in self._groups.get(name, [])]
