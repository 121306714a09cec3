from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import polars as pl

from .coerce import to_bool, to_number
from .csv_reader import Diagnostic, TableReadResult, read_table
from .models import (
    DocumentSet,
    Education,
    Experience,
    FocusArea,
    OrphanCaseStudy,
    Project,
    ProjectDetail,
    ResumeDocument,
    Section,
    SkillCategory,
)
from .schema import (
    DEFAULT_FIELD_ALIASES,
    DEFAULT_SOURCE_FILES,
    SOURCE_TABLES,
    merge_field_aliases,
    resolve_field,
)

LOGGER = logging.getLogger(__name__)

ORDER_COLUMN = "__order__"

Records = Sequence[Mapping[str, str]]


@dataclass
class BuildReport:
    table_row_counts: Dict[str, int]
    document_counts: Dict[str, int]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]


def table_frame(records: Records, fields: Mapping[str, Sequence[str]]) -> pl.DataFrame:
    """
    Project raw records onto canonical string columns.

    Each canonical column takes the first non-empty value among its accepted
    header spellings, so later steps never deal with aliases.
    """

    data = {canon: [resolve_field(record, aliases) for record in records] for canon, aliases in fields.items()}
    return pl.DataFrame(data, schema={canon: pl.Utf8 for canon in fields})


def sort_by_order(df: pl.DataFrame, order_field: str, fallback: float = 0) -> pl.DataFrame:
    """
    Stable ascending sort on a numeric order column.

    Missing or non-numeric values sort as `fallback`; ties keep table order.
    The coerced value is kept in ORDER_COLUMN.
    """

    values = [float(to_number(value, fallback)) for value in df.get_column(order_field).to_list()]
    return df.with_columns(pl.Series(ORDER_COLUMN, values, dtype=pl.Float64)).sort(
        ORDER_COLUMN, maintain_order=True
    )


def _order_value(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def _sections(df: pl.DataFrame) -> List[Section]:
    ordered = sort_by_order(df, "section_order")
    return [
        Section(
            image=row["image"],
            text=row["text"],
            section_title=row["section_title"] or None,
        )
        for row in ordered.iter_rows(named=True)
    ]


def group_sections(df: pl.DataFrame, key_field: str) -> Dict[str, List[Section]]:
    """
    Group section rows by foreign key, in order of first appearance.

    Rows with an empty key are dropped. Each group is sorted by section order.
    """

    keyed = df.filter(pl.col(key_field) != "")
    keys = keyed.get_column(key_field).unique(maintain_order=True).to_list()
    return {key: _sections(keyed.filter(pl.col(key_field) == key)) for key in keys}


def _details(df: pl.DataFrame, project_id: str) -> List[ProjectDetail]:
    matched = sort_by_order(df.filter(pl.col("project_id") == project_id), "detail_order")
    return [
        ProjectDetail(
            heading=row["heading"],
            text=row["text"],
            image=row["image"],
            case_study_link=row["case_study_link"],
            password=row["password"],
        )
        for row in matched.iter_rows(named=True)
    ]


def build_projects(
    projects: Records,
    details: Records,
    case_study_sections: Records,
    aliases: Mapping[str, Mapping[str, Sequence[str]]] = DEFAULT_FIELD_ALIASES,
) -> Tuple[List[Project], List[OrphanCaseStudy]]:
    """
    Join projects with their details and case-study sections.

    Returns (projects sorted by display order, orphan case studies). An orphan
    is a case-study group whose key matches no project id; it is kept so links
    straight to that id still resolve.
    """

    project_df = sort_by_order(table_frame(projects, aliases["projects"]), "display_order")
    detail_df = table_frame(details, aliases["project_details"])
    case_studies = group_sections(table_frame(case_study_sections, aliases["case_study_sections"]), "project_id")

    built: List[Project] = []
    for row in project_df.iter_rows(named=True):
        project_id = row["id"]
        image = row["image"]
        built.append(
            Project(
                id=project_id,
                title=row["title"],
                subtitle=row["subtitle"],
                description=row["description"],
                reversed=to_bool(row["reversed"]),
                has_detail_page=to_bool(row["has_detail_page"]),
                details=_details(detail_df, project_id),
                image=image,
                # project_images.csv is not read; the primary image is the gallery.
                images=[image] if image else [],
                case_study=list(case_studies.get(project_id, [])),
                display_order=_order_value(row[ORDER_COLUMN]),
                password=row["password"],
            )
        )

    known_ids = {p.id for p in built}
    orphans = [
        OrphanCaseStudy(id=key, case_study=sections)
        for key, sections in case_studies.items()
        if key not in known_ids
    ]
    return built, orphans


def build_focus_areas(
    focus_areas: Records,
    sections: Records,
    aliases: Mapping[str, Mapping[str, Sequence[str]]] = DEFAULT_FIELD_ALIASES,
) -> List[FocusArea]:
    """Attach ordered sections to each focus area and sort by display order."""

    area_df = sort_by_order(table_frame(focus_areas, aliases["focus_areas"]), "display_order")
    grouped = group_sections(table_frame(sections, aliases["focus_area_sections"]), "focus_area_id")

    return [
        FocusArea(
            id=row["id"],
            title=row["title"],
            subtitle=row["subtitle"],
            description=row["description"],
            sections=list(grouped.get(row["id"], [])),
            display_order=_order_value(row[ORDER_COLUMN]),
            password=row["password"],
        )
        for row in area_df.iter_rows(named=True)
    ]


def build_resume(
    header: Records,
    experience: Records,
    education: Records,
    skills: Records,
    aliases: Mapping[str, Mapping[str, Sequence[str]]] = DEFAULT_FIELD_ALIASES,
) -> ResumeDocument:
    """Assemble the resume; the header is the first header row, verbatim."""

    experience_df = sort_by_order(table_frame(experience, aliases["resume_experience"]), "display_order")
    education_df = sort_by_order(table_frame(education, aliases["resume_education"]), "display_order")
    skills_df = sort_by_order(table_frame(skills, aliases["resume_skills"]), "display_order")

    return ResumeDocument(
        header=dict(header[0]) if header else {},
        experience=[
            Experience(
                company=row["company"],
                location=row["location"],
                start_date=row["start_date"],
                end_date=row["end_date"],
                role=row["role"],
                description=row["description"],
            )
            for row in experience_df.iter_rows(named=True)
        ],
        education=[
            Education(
                school=row["school"],
                location=row["location"],
                start_date=row["start_date"],
                end_date=row["end_date"],
                degree=row["degree"],
                details=row["details"],
            )
            for row in education_df.iter_rows(named=True)
        ],
        skills=[
            SkillCategory(category=row["category"], items=row["items"])
            for row in skills_df.iter_rows(named=True)
        ],
    )


def build_documents(
    tables: Mapping[str, Records],
    aliases: Mapping[str, Mapping[str, Sequence[str]]] | None = None,
) -> Tuple[DocumentSet, BuildReport]:
    """
    Build every output document from raw tables keyed by logical table name.

    Missing tables are treated as empty. Returns (documents, report); the
    report carries no diagnostics here, see `build_from_directory`.
    """

    aliases = merge_field_aliases(aliases) if aliases else DEFAULT_FIELD_ALIASES

    def rows(name: str) -> Records:
        return tables.get(name) or []

    projects, orphans = build_projects(
        rows("projects"), rows("project_details"), rows("case_study_sections"), aliases
    )
    focus_areas = build_focus_areas(rows("focus_areas"), rows("focus_area_sections"), aliases)
    resume = build_resume(
        rows("resume_header"),
        rows("resume_experience"),
        rows("resume_education"),
        rows("resume_skills"),
        aliases,
    )

    documents = DocumentSet(projects=projects, focus_areas=focus_areas, resume=resume, case_studies=orphans)
    report = BuildReport(
        table_row_counts={name: len(rows(name)) for name in SOURCE_TABLES},
        document_counts={
            "projects": len(projects),
            "focus_areas": len(focus_areas),
            "case_studies": len(orphans),
            "experience": len(resume.experience),
            "education": len(resume.education),
            "skills": len(resume.skills),
        },
    )
    return documents, report


def load_tables(
    data_dir: Path,
    sources: Mapping[str, str] | None = None,
    names: Iterable[str] = SOURCE_TABLES,
) -> Dict[str, TableReadResult]:
    """Read every source table from `data_dir`; missing files read as empty."""

    sources = sources or DEFAULT_SOURCE_FILES
    results: Dict[str, TableReadResult] = {}
    for name in names:
        filename = sources.get(name, DEFAULT_SOURCE_FILES[name])
        results[name] = read_table(Path(data_dir) / filename, name=filename)
        LOGGER.info("Read %d rows from %s", len(results[name]), filename)
    return results


def build_from_directory(
    data_dir: Path,
    sources: Mapping[str, str] | None = None,
    aliases: Mapping[str, Mapping[str, Sequence[str]]] | None = None,
) -> Tuple[DocumentSet, BuildReport]:
    """Read the source tables under `data_dir` and build all documents."""

    results = load_tables(data_dir, sources)
    documents, report = build_documents({name: result.records for name, result in results.items()}, aliases)
    for result in results.values():
        report.diagnostics.extend(result.diagnostics)

    LOGGER.info(
        "Built %d projects, %d focus areas, %d standalone case studies, resume with "
        "%d experience, %d education, %d skills entries",
        report.document_counts["projects"],
        report.document_counts["focus_areas"],
        report.document_counts["case_studies"],
        report.document_counts["experience"],
        report.document_counts["education"],
        report.document_counts["skills"],
    )
    if report.errors:
        LOGGER.warning("%d row(s) skipped because they could not be parsed", len(report.errors))
    return documents, report
