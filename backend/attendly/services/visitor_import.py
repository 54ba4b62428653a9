"""Bulk visitor import - flattens pasted spreadsheet rows to name/contact."""

from attendly.models.visitor import VISITOR_CONTACT_MAX_LENGTH, VISITOR_NAME_MAX_LENGTH
from attendly.schemas.attendance import VisitorInput

MAX_IMPORTED_VISITORS = 5000
COLUMN_SEPARATOR = " | "


def parse_visitor_line(line: str) -> VisitorInput | None:
    """
    Parse one pasted row.

    Tab-separated rows (copied from Excel) win over comma-separated ones;
    a row with neither is just a name. Every column after the first is
    kept, joined into the contact field.

    Returns:
        VisitorInput, or None when the row has no name
    """
    line = line.strip()
    if not line:
        return None

    if "\t" in line:
        columns = line.split("\t")
    elif "," in line:
        columns = line.split(",")
    else:
        columns = [line]

    name = columns[0].strip()
    if not name:
        return None
    contact = COLUMN_SEPARATOR.join(column.strip() for column in columns[1:] if column.strip())

    return VisitorInput(
        name=name[:VISITOR_NAME_MAX_LENGTH],
        contact=contact[:VISITOR_CONTACT_MAX_LENGTH],
    )


def parse_visitor_import(text: str, limit: int = MAX_IMPORTED_VISITORS) -> tuple[list[VisitorInput], bool]:
    """
    Parse pasted text into visitors, one per line.

    Returns:
        (visitors, truncated) where truncated is True when rows beyond
        ``limit`` were dropped
    """
    visitors = []
    for line in text.splitlines():
        visitor = parse_visitor_line(line)
        if visitor is not None:
            visitors.append(visitor)
    return visitors[:limit], len(visitors) > limit
