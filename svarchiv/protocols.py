"""
Protocol archive.

The archive is a list of PDFs mirrored from a cloud drive by an external sync
job, which also writes index.json. Each index entry looks like:

    {"title": "SV-Protokoll", "date": "2025-11-25",
     "slug": "sv-protokoll-2025-11-25",
     "file": "/downloads/sv-protokoll-2025-11-25.pdf",
     "updatedAt": "2025-11-26T08:12:00.000Z"}

Drive files carry no project, tags or version, so those get fixed defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from svarchiv.model import Protocol, ProtocolMetadata
from svarchiv.storage import load_protocol_index


def _to_metadata(item: Dict[str, Any]) -> Optional[ProtocolMetadata]:
    slug = str(item.get("slug") or "").strip()
    if not slug:
        return None

    file = item.get("file")
    return ProtocolMetadata(
        slug=slug,
        title=str(item.get("title") or "Untitled"),
        date=str(item.get("date") or ""),
        file=str(file) if file else None,
    )


def get_all_protocols(path: str | Path | None = None) -> List[ProtocolMetadata]:
    """
    All protocol metadata for the archive list, in index order (newest first).
    """
    out: List[ProtocolMetadata] = []
    for item in load_protocol_index(path):
        meta = _to_metadata(item)
        if meta is not None:
            out.append(meta)
    return out


def get_all_projects(path: str | Path | None = None) -> List[str]:
    return sorted({p.project for p in get_all_protocols(path) if p.project})


def get_all_tags(path: str | Path | None = None) -> List[str]:
    return sorted({tag for p in get_all_protocols(path) for tag in p.tags})


def get_protocol_by_slug(slug: str, path: str | Path | None = None) -> Optional[Protocol]:
    """
    Single protocol with full content. PDFs have no text content, so
    content and html_content stay empty.
    """
    for meta in get_all_protocols(path):
        if meta.slug == slug:
            return Protocol(
                slug=meta.slug,
                title=meta.title,
                date=meta.date,
                project=meta.project,
                tags=list(meta.tags),
                version=meta.version,
                visibility=meta.visibility,
                file=meta.file,
            )
    return None


def get_all_protocol_slugs(path: str | Path | None = None) -> List[str]:
    return [p.slug for p in get_all_protocols(path)]


def filter_protocols(
    protocols: Iterable[ProtocolMetadata],
    query: str = "",
    project: str = "",
    tag: str = "",
) -> List[ProtocolMetadata]:
    """
    Filter by title substring (case-insensitive), exact project and tag.
    An empty filter value matches everything.
    """
    q = query.strip().lower()

    out: List[ProtocolMetadata] = []
    for p in protocols:
        if q and q not in p.title.lower():
            continue
        if project and p.project != project:
            continue
        if tag and tag not in p.tags:
            continue
        out.append(p)
    return out
