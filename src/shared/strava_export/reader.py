"""Header-driven reader for comma-separated Strava export tables."""

import csv
import io


def read_rows(text: str) -> list[list[str]]:
    """
    Split CSV text into rows of trimmed field values.

    Quoted fields may hold commas, newlines and "" escaped quotes. Blank
    lines are skipped.

    Args:
        text: Raw CSV text

    Returns:
        One list of values per record, header row included
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return []

    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    return [[value.strip() for value in row] for row in reader if row]


def read_table(text: str) -> list[dict[str, str]]:
    """
    Parse CSV text into one mapping per data row, keyed by header name.

    Rows whose field count differs from the header are dropped.

    Args:
        text: Raw CSV text with a header row

    Returns:
        List of row dictionaries; empty when there is no data row
    """
    rows = read_rows(text)
    if len(rows) < 2:
        return []

    headers = rows[0]
    return [dict(zip(headers, values)) for values in rows[1:] if len(values) == len(headers)]
