"""Concurrent dependency resolution on asyncio.

Sibling dependencies not yet recorded are fetched concurrently. A single
coordinating coroutine owns the accumulator: a repo is claimed (its
constraint recorded) before its fetch starts, so when two manifests both
first-discover a repo the earlier claim is canonical and the later one is
checked against it. Any fetch error or conflict cancels the fetches still in
flight for the same call.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Set

from constants import Constants
from manifest.models import Manifest, Repo
from versioning import DEFAULT_SYNTAX, OperatorSyntax, Version
from .resolver import Requirement, Resolution, check_compatible, parse_constraint, root_pins

logger = logging.getLogger(__name__)

AsyncFetchManifest = Callable[[Repo, Version], Awaitable[Manifest]]


class ConcurrentDependencyResolver:
    """Resolver issuing sibling manifest fetches concurrently.

    Args:
        fetch: coroutine function returning the manifest of a repo for a constraint
        syntax: operator syntax used to parse constraint strings
        max_concurrency: upper bound on fetches in flight
    """

    def __init__(
        self,
        fetch: AsyncFetchManifest,
        syntax: OperatorSyntax = DEFAULT_SYNTAX,
        max_concurrency: Optional[int] = None,
    ):
        self._fetch = fetch
        self.syntax = syntax
        self.max_concurrency = max(1, max_concurrency or Constants.MAX_CONCURRENCY)

    def resolve_sync(self, root: Manifest) -> Resolution:
        """Run resolve() on a fresh event loop."""
        return asyncio.run(self.resolve(root))

    async def resolve(self, root: Manifest) -> Resolution:
        """Resolve every direct and transitive dependency of root."""
        resolution = Resolution()
        pins = root_pins(root, self.syntax)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        in_flight: Dict[asyncio.Future, Repo] = {}

        async def bounded_fetch(repo: Repo, constraint: Version) -> Manifest:
            async with semaphore:
                return await self._fetch(repo, constraint)

        def claim(manifest: Manifest) -> None:
            for repo, raw in manifest.dependency.items():
                repo = Repo(repo)
                requested = (parse_constraint(repo, raw, self.syntax), raw)
                if repo in pins:
                    if pins[repo] is not None:
                        check_compatible(repo, pins[repo], requested)
                    continue
                existing = resolution.requirement(repo)
                if existing is not None:
                    check_compatible(repo, existing, requested)
                    continue
                resolution.record(repo, *requested)
                task = asyncio.ensure_future(bounded_fetch(repo, requested[0]))
                in_flight[task] = repo

        try:
            claim(root)
            while in_flight:
                done, _ = await asyncio.wait(set(in_flight), return_when=asyncio.FIRST_COMPLETED)
                for task in _in_claim_order(in_flight, done):
                    repo = in_flight.pop(task)
                    dep = task.result()
                    resolution.manifests[repo] = dep
                    logger.debug("Resolved %s %s -> %s", repo, resolution.raw[repo], dep.version)
                    claim(dep)
        finally:
            await _cancel(in_flight)

        logger.info("Resolved %d dependencies for %s", len(resolution.constraints), root.display_name or "manifest")
        return resolution


def _in_claim_order(in_flight: Dict[asyncio.Future, Repo], done: Set[asyncio.Future]):
    """Completed tasks ordered by when they were claimed."""
    return [task for task in in_flight if task in done]


async def _cancel(in_flight: Dict[asyncio.Future, Repo]) -> None:
    """Cancel and reap every task still in flight."""
    if not in_flight:
        return
    for task in in_flight:
        task.cancel()
    await asyncio.gather(*in_flight, return_exceptions=True)
    in_flight.clear()
