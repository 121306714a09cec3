from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence


@dataclass(frozen=True)
class TableSchema:
    """Canonical definition of a hand-edited source table."""

    name: str
    filename: str
    fields: Mapping[str, Sequence[str]]  # canonical field -> accepted headers, highest priority first
    order_field: str = ""


# Snake case spelling wins over camelCase; within a pair like image/image_url the
# spelling the content authors used first stays first.
PROJECT_FIELDS: Mapping[str, Sequence[str]] = {
    "id": ("id",),
    "title": ("title",),
    "subtitle": ("subtitle",),
    "description": ("description",),
    "reversed": ("reversed",),
    "has_detail_page": ("has_detail_page", "hasDetailPage"),
    "image": ("image", "image_url"),
    "display_order": ("display_order", "displayOrder"),
    "password": ("password",),
}

PROJECT_DETAIL_FIELDS: Mapping[str, Sequence[str]] = {
    "project_id": ("project_id", "projectId"),
    "heading": ("heading",),
    "text": ("text",),
    "image": ("image", "image_url"),
    "case_study_link": ("case_study_link", "caseStudyLink"),
    "password": ("password",),
    "detail_order": ("detail_order", "detailOrder"),
}

CASE_STUDY_SECTION_FIELDS: Mapping[str, Sequence[str]] = {
    "project_id": ("project_id", "projectId"),
    "image": ("image_url", "image"),
    "text": ("text",),
    "section_title": ("section_title", "sectionTitle"),
    "section_order": ("section_order", "sectionOrder"),
}

FOCUS_AREA_FIELDS: Mapping[str, Sequence[str]] = {
    "id": ("id",),
    "title": ("title",),
    "subtitle": ("subtitle",),
    "description": ("description",),
    "display_order": ("display_order", "displayOrder"),
    "password": ("password",),
}

FOCUS_AREA_SECTION_FIELDS: Mapping[str, Sequence[str]] = {
    "focus_area_id": ("focus_area_id", "focusAreaId"),
    "image": ("image_url", "image"),
    "text": ("text",),
    "section_title": ("section_title", "sectionTitle"),
    "section_order": ("section_order", "sectionOrder"),
}

RESUME_EXPERIENCE_FIELDS: Mapping[str, Sequence[str]] = {
    "company": ("company",),
    "location": ("location",),
    "start_date": ("start_date", "startDate"),
    "end_date": ("end_date", "endDate"),
    "role": ("role",),
    "description": ("description",),
    "display_order": ("display_order", "displayOrder"),
}

RESUME_EDUCATION_FIELDS: Mapping[str, Sequence[str]] = {
    "school": ("school",),
    "location": ("location",),
    "start_date": ("start_date", "startDate"),
    "end_date": ("end_date", "endDate"),
    "degree": ("degree",),
    "details": ("details",),
    "display_order": ("display_order", "displayOrder"),
}

RESUME_SKILL_FIELDS: Mapping[str, Sequence[str]] = {
    "category": ("category",),
    "items": ("items",),
    "display_order": ("display_order", "displayOrder"),
}


def _table_schema() -> Dict[str, TableSchema]:
    """Build immutable table schema map."""

    return {
        "projects": TableSchema("projects", "projects.csv", PROJECT_FIELDS, order_field="display_order"),
        "project_details": TableSchema(
            "project_details",
            "project_details.csv",
            PROJECT_DETAIL_FIELDS,
            order_field="detail_order",
        ),
        "case_study_sections": TableSchema(
            "case_study_sections",
            "case_study_sections.csv",
            CASE_STUDY_SECTION_FIELDS,
            order_field="section_order",
        ),
        "focus_areas": TableSchema("focus_areas", "focus_areas.csv", FOCUS_AREA_FIELDS, order_field="display_order"),
        "focus_area_sections": TableSchema(
            "focus_area_sections",
            "focus_area_sections.csv",
            FOCUS_AREA_SECTION_FIELDS,
            order_field="section_order",
        ),
        # The header row is copied verbatim, so it has no canonical fields.
        "resume_header": TableSchema("resume_header", "resume_header.csv", {}),
        "resume_experience": TableSchema(
            "resume_experience",
            "resume_experience.csv",
            RESUME_EXPERIENCE_FIELDS,
            order_field="display_order",
        ),
        "resume_education": TableSchema(
            "resume_education",
            "resume_education.csv",
            RESUME_EDUCATION_FIELDS,
            order_field="display_order",
        ),
        "resume_skills": TableSchema(
            "resume_skills",
            "resume_skills.csv",
            RESUME_SKILL_FIELDS,
            order_field="display_order",
        ),
    }


TABLE_SCHEMAS: Dict[str, TableSchema] = _table_schema()
SOURCE_TABLES: Sequence[str] = tuple(TABLE_SCHEMAS)
DEFAULT_SOURCE_FILES: Dict[str, str] = {name: schema.filename for name, schema in TABLE_SCHEMAS.items()}

OUTPUT_DOCUMENTS: Sequence[str] = ("projects", "focus_areas", "resume", "case_studies")
DEFAULT_OUTPUT_FILES: Dict[str, str] = {
    "projects": "projects.json",
    "focus_areas": "focus-areas.json",
    "resume": "resume.json",
    "case_studies": "case-studies.json",
}


def merge_field_aliases(
    overrides: Mapping[str, Mapping[str, Sequence[str]]] | None,
    base: Mapping[str, Mapping[str, Sequence[str]]] | None = None,
) -> Dict[str, Dict[str, List[str]]]:
    """
    Merge alias overrides into the canonical table schemas.

    Overrides are canonical field -> alias list per table and replace the
    default list for that field. Missing entries fall back to defaults so
    callers only need to specify the deltas.
    """

    if base is None:
        base = {name: schema.fields for name, schema in TABLE_SCHEMAS.items()}
    mapping: Dict[str, Dict[str, List[str]]] = {
        table: {field: [str(a) for a in aliases] for field, aliases in fields.items()}
        for table, fields in base.items()
    }

    if overrides:
        for table, fields in overrides.items():
            target = mapping.setdefault(table, {})
            for field, aliases in fields.items():
                if isinstance(aliases, str):
                    aliases = [aliases]
                target[str(field)] = [str(a) for a in aliases]
    return mapping


def resolve_field(record: Mapping[str, str], aliases: Sequence[str]) -> str:
    """
    Return the first non-empty value among the accepted header spellings.

    Values are trimmed; a record carrying none of the aliases resolves to "".
    """

    for alias in aliases:
        value = record.get(alias)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return ""


DEFAULT_FIELD_ALIASES: Dict[str, Dict[str, List[str]]] = merge_field_aliases(None)
