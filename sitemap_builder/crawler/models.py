"""
Data models for the sitemap crawler.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class Link:
    """Anchor found on a page: absolute href (identity) and its visible text."""

    href: str
    text: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class CrawlNode:
    """Frontier entry: a link and its BFS distance from the seed."""

    link: Link
    depth: int


@dataclass(frozen=True, slots=True)
class FetchFailure:
    url: str
    depth: int
    reason: str


@dataclass(slots=True)
class CrawlResult:
    """Outcome of one crawl run, in BFS discovery order."""

    seed_url: str
    max_depth: int
    links: List[Link] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    completed: bool = True
    duration: float = 0.0

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation used by the crawl report."""
        output = {
            "seed_url": self.seed_url,
            "max_depth": self.max_depth,
            "completed": self.completed,
            "duration": round(self.duration, 3),
            "total": len(self.links),
            "links": [asdict(link) for link in self.links],
            "failures": [asdict(failure) for failure in self.failures],
        }
        return json.dumps(output, ensure_ascii=False, indent=2 if pretty else None)
