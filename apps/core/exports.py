"""Download helpers shared by the export endpoints."""

import csv
import json
from typing import Iterable, Mapping, Sequence

from django.core.serializers.json import DjangoJSONEncoder
from django.http import HttpResponse

from .dates import utc_today


def _attachment(response: HttpResponse, filename_prefix: str, extension: str) -> HttpResponse:
    filename = f"{filename_prefix}_{utc_today().isoformat()}.{extension}"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def build_csv_response(filename_prefix: str, header: Sequence[str], rows: Iterable[Sequence]) -> HttpResponse:
    """
    Write ``header`` and ``rows`` into a downloadable CSV response.

    The file is named ``<prefix>_<YYYY-MM-DD>.csv`` using today's UTC date.
    """
    response = _attachment(HttpResponse(content_type='text/csv'), filename_prefix, 'csv')

    writer = csv.writer(response)
    writer.writerow(header)
    for row in rows:
        writer.writerow(['' if value is None else value for value in row])

    return response


def build_jsonl_response(filename_prefix: str, records: Iterable[Mapping]) -> HttpResponse:
    """Write one JSON object per line into a downloadable ``.jsonl`` response."""
    response = _attachment(HttpResponse(content_type='application/jsonlines'), filename_prefix, 'jsonl')
    for record in records:
        response.write(json.dumps(record, cls=DjangoJSONEncoder))
        response.write('\n')
    return response
