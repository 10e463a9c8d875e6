"""Tests for the JSON log formatter configured in settings."""

import json
import logging
import sys

import structlog
from django.conf import settings


def _json_formatter():
    options = {key: value for key, value in settings.LOGGING['formatters']['json'].items() if key != '()'}
    return structlog.stdlib.ProcessorFormatter(**options)


class TestJsonFormatter:

    def test_stdlib_exception_renders_traceback(self):
        try:
            raise TypeError('comparing strings with non-ASCII characters is not supported')
        except TypeError:
            record = logging.LogRecord(
                'django.request', logging.ERROR, __file__, 1,
                'Internal Server Error: %s', ('/api/events/cron/',), sys.exc_info(),
            )

        line = json.loads(_json_formatter().format(record))

        assert line['event'] == 'Internal Server Error: /api/events/cron/'
        assert line['level'] == 'error'
        assert 'Traceback (most recent call last)' in line['exception']
        assert 'TypeError: comparing strings' in line['exception']
        assert 'exc_info' not in line

    def test_extra_fields_are_kept(self):
        record = logging.LogRecord('apps.inventory', logging.INFO, __file__, 1, 'Item created', (), None)
        record.item_id = 'abc'

        line = json.loads(_json_formatter().format(record))

        assert line['item_id'] == 'abc'
        assert line['logger'] == 'apps.inventory'
