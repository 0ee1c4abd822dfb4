"""Ways of pushing rendered files into a repository."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Mapping

from .gateway import RepoGateway


class PRStrategy(ABC):
    """Pushes a set of files into a repository."""

    @abstractmethod
    def apply(self, repo: RepoGateway, files: Mapping[str, bytes]) -> None:
        """Write *files* (repository path to content) into *repo*."""


@dataclass(frozen=True)
class DirectCommitStrategy(PRStrategy):
    """Commits straight to the default branch."""

    def apply(self, repo: RepoGateway, files: Mapping[str, bytes]) -> None:
        branch = repo.default_branch()
        for path, content in files.items():
            repo.write_file(path, content, branch)


@dataclass(frozen=True)
class FeatureBranchPRStrategy(PRStrategy):
    """Commits to a fresh ``appsync/<timestamp>`` branch and opens a pull request."""

    clock: Callable[[], float] = time.time

    def apply(self, repo: RepoGateway, files: Mapping[str, bytes]) -> None:
        base = repo.default_branch()
        head = f"appsync/{int(self.clock())}"
        repo.create_branch(base, head)
        for path, content in files.items():
            repo.write_file(path, content, head)
        repo.pull_request("appsync sync", "", base, head)