"""
Read-only access to the generated content documents.

The pipeline writes projects.json, focus-areas.json, resume.json and
case-studies.json; `ContentStore` loads them once and answers the lookups the
site needs. Nothing here recomputes or mutates the documents.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from portfolio_data.schema import DEFAULT_OUTPUT_FILES

LOGGER = logging.getLogger(__name__)

Document = Dict[str, Any]


def _load_json(path: Path, empty: Any) -> Any:
    """Load one document; a missing file reads as `empty`."""

    if not path.exists():
        LOGGER.warning("Content document %s not found; using empty data", path)
        return empty
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _trim(value: Optional[str]) -> str:
    return (value or "").strip()


def sort_by_display_order(items: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """
    Menu ordering: ascending displayOrder, entries without one sort last.

    Unlike the build step (which defaults a missing order to 0) this keeps
    unordered entries at the end. Ties keep their incoming order.
    """

    def key(item: Mapping[str, Any]) -> float:
        value = item.get("displayOrder")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return math.inf
        return float(value)

    return sorted(items, key=key)


class ContentStore:
    """Lazy, cached view over the documents in `output_dir`."""

    def __init__(self, output_dir: Path, names: Mapping[str, str] | None = None) -> None:
        self.output_dir = Path(output_dir)
        self.names: Dict[str, str] = {**DEFAULT_OUTPUT_FILES, **(names or {})}
        self._cache: Dict[str, Any] = {}

    def _document(self, name: str, empty: Any) -> Any:
        if name not in self._cache:
            self._cache[name] = _load_json(self.output_dir / self.names[name], empty)
        return self._cache[name]

    def reload(self) -> None:
        """Drop cached documents so the next lookup reads the files again."""

        self._cache.clear()

    def fetch_projects(self) -> List[Document]:
        return self._document("projects", [])

    def fetch_project_by_id(self, project_id: Optional[str]) -> Optional[Document]:
        wanted = _trim(project_id)
        return next((p for p in self.fetch_projects() if p.get("id") == wanted), None)

    def fetch_focus_areas(self) -> List[Document]:
        return self._document("focus_areas", [])

    def fetch_focus_area_by_id(self, focus_area_id: Optional[str]) -> Optional[Document]:
        wanted = _trim(focus_area_id)
        return next((a for a in self.fetch_focus_areas() if a.get("id") == wanted), None)

    def fetch_standalone_case_studies(self) -> List[Document]:
        return self._document("case_studies", [])

    def fetch_resume(self) -> Document:
        return self._document("resume", {"header": {}, "experience": [], "education": [], "skills": []})

    def fetch_case_study(self, case_study_id: Optional[str]) -> List[Document]:
        """
        Case-study sections for an id.

        A project's own non-empty case study wins; otherwise the standalone
        collection is checked (for ids reached through a caseStudyLink).
        """

        wanted = _trim(case_study_id)
        project = self.fetch_project_by_id(wanted)
        if project and project.get("caseStudy"):
            return project["caseStudy"]

        standalone = next((c for c in self.fetch_standalone_case_studies() if c.get("id") == wanted), None)
        if standalone and standalone.get("caseStudy"):
            return standalone["caseStudy"]
        return []

    def find_project_detail_by_case_study_link(
        self, case_study_id: Optional[str]
    ) -> Optional[Tuple[Document, Document]]:
        """Return (project, detail) for the first detail whose caseStudyLink matches."""

        wanted = _trim(case_study_id)
        if not wanted:
            return None
        for project in self.fetch_projects():
            for detail in project.get("details") or []:
                if _trim(detail.get("caseStudyLink")) == wanted:
                    return project, detail
        return None
