"""
CSV-to-JSON content pipeline for the portfolio site: tolerant CSV reading,
relational normalization of projects, focus areas and resume tables, and
atomic document writing.
"""

from .coerce import to_bool, to_number  # noqa: F401
from .csv_reader import (  # noqa: F401
    CSVParseError,
    Diagnostic,
    TableReadResult,
    parse_csv,
    parse_csv_line,
    read_table,
)
from .models import DocumentSet  # noqa: F401
from .normalize import (  # noqa: F401
    BuildReport,
    build_documents,
    build_focus_areas,
    build_from_directory,
    build_projects,
    build_resume,
    load_tables,
)
from .schema import (  # noqa: F401
    DEFAULT_FIELD_ALIASES,
    DEFAULT_OUTPUT_FILES,
    DEFAULT_SOURCE_FILES,
    TABLE_SCHEMAS,
    merge_field_aliases,
    resolve_field,
)
from .writer import DocumentWriteError, dump_document, write_document, write_documents  # noqa: F401

__all__ = [
    "to_bool",
    "to_number",
    "CSVParseError",
    "Diagnostic",
    "TableReadResult",
    "parse_csv",
    "parse_csv_line",
    "read_table",
    "DocumentSet",
    "BuildReport",
    "build_documents",
    "build_focus_areas",
    "build_from_directory",
    "build_projects",
    "build_resume",
    "load_tables",
    "DEFAULT_FIELD_ALIASES",
    "DEFAULT_OUTPUT_FILES",
    "DEFAULT_SOURCE_FILES",
    "TABLE_SCHEMAS",
    "merge_field_aliases",
    "resolve_field",
    "DocumentWriteError",
    "dump_document",
    "write_document",
    "write_documents",
]
