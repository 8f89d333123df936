"""Pull-request report rendering."""

from .markdown import (  # noqa: F401
    Finding,
    ReportData,
    ReportEntry,
    collect_findings,
    render_markdown,
)
