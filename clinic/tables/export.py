"""
CSV export of a table's filtered collection.

Exports always receive the full searched/filtered/sorted collection,
never just the visible page.  Header cells come from the column labels
and body cells from each column's ``render`` (or the raw value).
"""
from __future__ import annotations

import csv
import io
import logging
from typing import Iterable, Optional, Sequence

from django.http import HttpResponse
from django.utils import timezone

from .definitions import Column, Record

logger = logging.getLogger(__name__)


def export_filename(prefix: str, when=None) -> str:
    when = when or timezone.localdate()
    return f"{prefix}-{when.strftime('%Y-%m-%d')}.csv"


def write_csv(records: Iterable[Record], columns: Sequence[Column]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow([c.label for c in columns])
    for record in records:
        writer.writerow([c.display(record) for c in columns])
    return buf.getvalue()


def csv_response(records: Sequence[Record], columns: Sequence[Column], prefix: str,
                 filename: Optional[str] = None) -> HttpResponse:
    filename = filename or export_filename(prefix)
    body = write_csv(records, columns)
    logger.info('csv export %s: %d rows', filename, len(records))
    resp = HttpResponse(body, content_type='text/csv; charset=utf-8')
    resp['Content-Disposition'] = f'attachment; filename="{filename}"'
    return resp
