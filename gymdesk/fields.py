# gymdesk/fields.py
from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers


class DateOrDateTimeField(serializers.DateTimeField):
    """
    DateTimeField that also accepts a bare "YYYY-MM-DD" (what date pickers
    send) and reads it as the start of that day in the current timezone.
    """

    def to_internal_value(self, value):
        if isinstance(value, str):
            try:
                d = parse_date(value.strip())
            except ValueError:
                d = None
            if d is not None:
                return timezone.make_aware(datetime.combine(d, time.min))
        return super().to_internal_value(value)
