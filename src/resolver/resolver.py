"""Recursive dependency resolution over release manifests.

Resolution walks a root manifest depth-first. The first constraint found for
a repo is the one recorded; every later requirement on that repo is checked
against it and must be compatible, otherwise resolution stops with a
VersionConflict. A repo is fetched at most once per resolve() call, which is
what makes dependency cycles terminate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from common.errors import VersionConflict
from common.logging_utils import extra_context, is_debug_enabled
from manifest.models import Manifest, Repo
from versioning import DEFAULT_SYNTAX, OperatorRole, OperatorSyntax, Version, intersects, is_valid, parse

logger = logging.getLogger(__name__)

FetchManifest = Callable[[Repo, Version], Manifest]

# A recorded requirement: the parsed constraint and the string it came from.
Requirement = Tuple[Version, str]


@dataclass
class Resolution:
    """Outcome of one resolution call.

    constraints is the accumulator (Repo -> recorded constraint); raw keeps
    the constraint strings as written; manifests holds every manifest fetched
    during the call.
    """
    constraints: Dict[Repo, Version] = field(default_factory=dict)
    raw: Dict[Repo, str] = field(default_factory=dict)
    manifests: Dict[Repo, Manifest] = field(default_factory=dict)

    def requirement(self, repo: Repo) -> Optional[Requirement]:
        if repo not in self.constraints:
            return None
        return self.constraints[repo], self.raw[repo]

    def record(self, repo: Repo, constraint: Version, raw: str) -> None:
        self.constraints[repo] = constraint
        self.raw[repo] = raw

    def as_dependency_map(self) -> Dict[Repo, str]:
        """Repo -> constraint string, suitable for a manifest's dependency field."""
        return dict(self.raw)


def parse_constraint(repo: Repo, raw: str, syntax: OperatorSyntax = DEFAULT_SYNTAX) -> Version:
    """Parse a dependency constraint string.

    An empty constraint accepts any version. A malformed one degrades to the
    zero version, which is logged since it will rarely match a release.
    """
    if not raw or not raw.strip():
        return parse("v0.0.0", syntax).with_role(OperatorRole.GTE)
    if not is_valid(raw, syntax):
        logger.warning("Invalid version constraint '%s' for %s, treating as v0.0.0", raw, repo)
    return parse(raw, syntax)


def root_pins(root: Manifest, syntax: OperatorSyntax = DEFAULT_SYNTAX) -> Dict[Repo, Optional[Requirement]]:
    """Pin the root's own repo so a cycle back to it is checked, never fetched.

    A root without a valid version accepts any requirement on itself.
    """
    if not root.repo:
        return {}
    if is_valid(root.version, syntax):
        return {Repo(root.repo): (parse(root.version, syntax).base(), root.version)}
    return {Repo(root.repo): None}


def check_compatible(repo: Repo, existing: Requirement, requested: Requirement) -> None:
    """Raise VersionConflict unless some version satisfies both requirements."""
    if intersects(existing[0], requested[0]):
        return
    raise VersionConflict(repo, existing[1], requested[1])


class DependencyResolver:
    """Sequential, depth-first dependency resolver.

    Args:
        fetch: callable returning the manifest of a repo for a constraint;
            errors it raises abort resolution unchanged
        syntax: operator syntax used to parse constraint strings
    """

    def __init__(self, fetch: FetchManifest, syntax: OperatorSyntax = DEFAULT_SYNTAX):
        self._fetch = fetch
        self.syntax = syntax

    def resolve(self, root: Manifest) -> Resolution:
        """Resolve every direct and transitive dependency of root."""
        resolution = Resolution()
        self._walk(root, resolution, root_pins(root, self.syntax))
        logger.info("Resolved %d dependencies for %s", len(resolution.constraints), root.display_name or "manifest")
        return resolution

    def add_dependency(self, root: Manifest, repo: str, constraint: str) -> Manifest:
        """Return a copy of root with repo and its transitive dependencies added.

        Entries already in root are taken as recorded and are not refetched;
        the new requirement must be compatible with them.
        """
        resolution = Resolution()
        for dep_repo, raw in root.dependency.items():
            dep_repo = Repo(dep_repo)
            resolution.record(dep_repo, parse_constraint(dep_repo, raw, self.syntax), raw)
        request = Manifest(dependency={Repo(repo): constraint})
        self._walk(request, resolution, root_pins(root, self.syntax))
        return root.with_dependencies(resolution.as_dependency_map())

    def _walk(self, manifest: Manifest, resolution: Resolution, pins: Dict[Repo, Optional[Requirement]]) -> None:
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
                if is_debug_enabled(logger):
                    logger.debug(
                        "Dependency already resolved",
                        extra=extra_context(
                            event="decision",
                            component="resolver",
                            action="keep_existing",
                            target=str(repo),
                            existing=existing[1],
                            requested=raw
                        )
                    )
                continue

            dep = self._fetch(repo, requested[0])
            resolution.record(repo, *requested)
            resolution.manifests[repo] = dep
            logger.debug("Resolved %s %s -> %s", repo, raw, dep.version)
            self._walk(dep, resolution, pins)
