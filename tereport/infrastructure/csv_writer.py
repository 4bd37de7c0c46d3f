# ==============================================================================
# CSV Serializer
# ==============================================================================
"""
Serialize report tables to CSV text.
"""

import csv
import io
from collections.abc import Sequence


def write_csv(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """
    Render a header row and data rows as CSV text.

    Fields are quoted only when they contain a delimiter, quote or newline.

    Args:
        header: Column titles
        rows: Data rows of string cells

    Returns:
        CSV text with "\\r\\n" line endings
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()
