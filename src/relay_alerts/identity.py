"""Physical bulletin identity."""

import re

from relay_alerts.models import AlertRecord

NON_DIGITS = re.compile(r"\D")


def compute_page_key(record: AlertRecord, unique_length: int) -> str:
    """Build a source-independent key for the bulletin behind `record`.

    Short page keys are only unique within a period, so they are prefixed with
    four digits of the release time after the century (e.g. "2401" for a
    January 2024 release). Keys at least `unique_length` long are used as is.
    """
    if len(record.page_key) >= unique_length:
        return record.page_key

    digits = NON_DIGITS.sub("", record.release_time)
    return digits[2:6] + record.page_key
