"""Data models for the swiz.zle manifest format."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class Repo(str):
    """GitHub repository name ("owner/name") hosting mod releases.

    Compares and hashes as the plain string, so it can key a mapping read
    straight from YAML or JSON.
    """

    @property
    def owner(self) -> str:
        return self.split("/")[0]

    @property
    def name(self) -> str:
        parts = self.split("/")
        if len(parts) > 1:
            return parts[1]
        return str(self)


class EsrbRating(Enum):
    """ESRB content ratings accepted in a manifest."""
    EVERYONE = "E"
    EVERYONE_10_PLUS = "E10+"
    TEEN = "T"
    MATURE = "M"
    ADULTS_ONLY = "AO"


@dataclass
class AgeRating:
    """Content age rating. An unset rating is assumed safe for all ages."""
    esrb: Optional[EsrbRating] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AgeRating":
        if not isinstance(data, dict) or not data.get("esrb"):
            return cls()
        return cls(esrb=EsrbRating(str(data["esrb"])))

    def to_dict(self) -> Dict[str, Any]:
        return {"esrb": self.esrb.value} if self.esrb else {}


@dataclass
class Game:
    """Game executable and version constraint a mod supports.

    An empty version matches every game version.
    """
    executable: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Game":
        if not isinstance(data, dict):
            return cls()
        return cls(
            executable=_text(data.get("executable")),
            version=_text(data.get("version")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"executable": self.executable, "version": self.version})


@dataclass
class ReleaseAsset:
    """A file attached to a GitHub release."""
    name: str
    download_url: str
    size: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ReleaseAsset":
        return cls(
            name=data.get("name") or "",
            download_url=data.get("browser_download_url") or "",
            size=int(data.get("size") or 0),
        )


@dataclass
class Release:
    """A GitHub release: its tag and attached assets."""
    tag_name: str
    assets: List[ReleaseAsset] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Release":
        return cls(
            tag_name=data.get("tag_name") or "",
            assets=[ReleaseAsset.from_api(a) for a in data.get("assets") or [] if isinstance(a, dict)],
        )

    def asset(self, name: str) -> Optional[ReleaseAsset]:
        for a in self.assets:
            if a.name == name:
                return a
        return None


@dataclass
class ReleaseFile:
    """An archive bundled with a mod release.

    source is the path prefix of mod content inside the archive (default: the
    archive root); destination is the folder, relative to the game directory,
    the content is installed into (default: the game directory itself).
    """
    name: str
    source: str = ""
    destination: str = ""
    asset: Optional[ReleaseAsset] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseFile":
        return cls(
            name=_text(data.get("name")),
            source=_text(data.get("source")),
            destination=_text(data.get("destination")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"name": self.name, "source": self.source, "destination": self.destination})


@dataclass
class Manifest:
    """A mod release manifest (swiz.zle / swizzle.yml)."""
    name: str = ""
    repo: Repo = Repo("")
    version: str = ""
    description: str = ""
    license: str = ""
    age_rating: AgeRating = field(default_factory=AgeRating)
    game: Game = field(default_factory=Game)
    dependency: Dict[Repo, str] = field(default_factory=dict)
    files: List[ReleaseFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        deps = data.get("dependency") or {}
        if not isinstance(deps, dict):
            raise TypeError(f"dependency must be a mapping, got {type(deps).__name__}")
        files = data.get("files") or []
        if not isinstance(files, list):
            raise TypeError(f"files must be a list, got {type(files).__name__}")
        return cls(
            name=_text(data.get("name")),
            repo=Repo(_text(data.get("repo"))),
            version=_text(data.get("version")),
            description=_text(data.get("description")),
            license=_text(data.get("license")),
            age_rating=AgeRating.from_dict(data.get("ages")),
            game=Game.from_dict(data.get("game")),
            dependency={Repo(str(k)): _text(v) for k, v in deps.items()},
            files=[ReleaseFile.from_dict(f) for f in files if isinstance(f, dict)],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form; empty fields and runtime-only state are omitted."""
        return _compact({
            "ages": self.age_rating.to_dict(),
            "dependency": {str(k): v for k, v in self.dependency.items()},
            "description": self.description,
            "files": [f.to_dict() for f in self.files],
            "game": self.game.to_dict(),
            "license": self.license,
            "name": self.name,
            "repo": str(self.repo),
            "version": self.version,
        })

    @property
    def display_name(self) -> str:
        """Manifest name, defaulting to the repo name."""
        return self.name or self.repo.name

    def with_dependencies(self, dependency: Dict[Repo, str]) -> "Manifest":
        """Return a copy whose dependency mapping is replaced."""
        return replace(self, dependency=dict(dependency))

    def attach_assets(self, release: Release) -> None:
        """Match each release file with the release asset of the same name."""
        for f in self.files:
            f.asset = release.asset(f.name)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v not in ("", None, {}, [])}
