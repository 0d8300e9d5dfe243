"""Placeholder graph data for the visualization pane."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
import random
import re
from typing import Any, Dict, List, Optional

import frontmatter

from .vault import NoteRepository, iter_files

logger = logging.getLogger(__name__)

H1_PATTERN = re.compile(r"^\s*#\s+(.+)$", re.MULTILINE)
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600


def derive_label(note_path: str, content: str) -> str:
    """Frontmatter title, then first H1, then the file stem."""
    stem = PurePosixPath(note_path).stem
    try:
        post = frontmatter.loads(content)
    except Exception:
        return stem
    title = post.metadata.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    match = H1_PATTERN.search(post.content or "")
    if match:
        return match.group(1).strip()
    return stem


def build_graph(
    repository: NoteRepository,
    *,
    edge_probability: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Build nodes for every note and random edges between them.

    Edges are placeholders; nothing about note content is inferred.
    """
    rng = rng or random.Random()
    if edge_probability is None:
        edge_probability = repository.config.graph_edge_probability

    nodes: List[Dict[str, Any]] = []
    for file_node in iter_files(repository.list()):
        note_path = file_node["path"]
        try:
            label = derive_label(note_path, repository.get(note_path))
        except Exception:
            logger.warning("Could not read %s for graph label", note_path)
            label = PurePosixPath(note_path).stem
        nodes.append(
            {
                "id": note_path,
                "type": "default",
                "position": {
                    "x": rng.random() * CANVAS_WIDTH,
                    "y": rng.random() * CANVAS_HEIGHT,
                },
                "data": {"label": label},
            }
        )

    edges: List[Dict[str, str]] = []
    for index, source in enumerate(nodes):
        for target in nodes[index + 1 :]:
            if rng.random() < edge_probability:
                edges.append(
                    {
                        "id": f"{source['id']}-{target['id']}",
                        "source": source["id"],
                        "target": target["id"],
                    }
                )
    return {"nodes": nodes, "edges": edges}


__all__ = ["build_graph", "derive_label"]
