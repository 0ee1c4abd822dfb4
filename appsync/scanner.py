"""Discovery of applications in a catalogue directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .config import Filter
from .domain import ApplicationDescriptor


def _subdirectories(path: str) -> list[str]:
    with os.scandir(path) as entries:
        return sorted(e.name for e in entries if e.is_dir(follow_symlinks=False))


@dataclass
class CatalogScanner:
    """Walks ``<root>/<team>/<app>`` directories."""

    root: str
    filter: Filter = field(default_factory=Filter)

    def scan(self) -> list[ApplicationDescriptor]:
        """Return a descriptor for every matching application, in name order."""
        found = []
        for team in _subdirectories(self.root):
            if self.filter.team and self.filter.team != team:
                continue
            team_path = os.path.join(self.root, team)
            for app in _subdirectories(team_path):
                if self.filter.app and self.filter.app != app:
                    continue
                found.append(
                    ApplicationDescriptor(
                        team=team,
                        app=app,
                        source_path=os.path.join(team_path, app),
                    )
                )
        return found