"""
Read-only accessors over the generated content documents, used by the site
and by tooling that inspects a build.
"""

from .content_store import ContentStore, sort_by_display_order  # noqa: F401

__all__ = ["ContentStore", "sort_by_display_order"]
