"""Bitbucket project and repository data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _first_href(links: Dict[str, Any], rel: str) -> Optional[str]:
    entries = links.get(rel) or []
    if entries and isinstance(entries[0], dict):
        return entries[0].get('href')
    return None


@dataclass(frozen=True)
class Project:
    """Bitbucket project.

    Attributes:
        key: Project key (e.g., "PROJ")
        name: Display name
        id: Server-assigned identifier
        public: Whether anonymous users can read the project
        self_link: Browser URL of the project
    """
    key: str
    name: str
    id: Optional[int] = None
    public: bool = False
    self_link: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            key=data['key'],
            name=data.get('name', data['key']),
            id=data.get('id'),
            public=bool(data.get('public', False)),
            self_link=_first_href(data.get('links') or {}, 'self'),
        )


@dataclass(frozen=True)
class Repository:
    """Bitbucket repository.

    Attributes:
        slug: URL-safe repository identifier within its project
        name: Display name
        project: Owning project
        id: Server-assigned identifier
        state: Repository state (e.g., "AVAILABLE")
        clone_urls: Clone URL per protocol name (e.g., {"http": ..., "ssh": ...})
        self_link: Browser URL of the repository
    """
    slug: str
    name: str
    project: Project
    id: Optional[int] = None
    state: Optional[str] = None
    clone_urls: Dict[str, str] = field(default_factory=dict)
    self_link: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Repository':
        links = data.get('links') or {}
        clone_links: List[Dict[str, Any]] = links.get('clone') or []
        return cls(
            slug=data['slug'],
            name=data.get('name', data['slug']),
            project=Project.from_json(data['project']),
            id=data.get('id'),
            state=data.get('state'),
            clone_urls={
                link['name']: link['href']
                for link in clone_links
                if 'name' in link and 'href' in link
            },
            self_link=_first_href(links, 'self'),
        )
