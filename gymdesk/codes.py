# gymdesk/codes.py
"""
Human-readable sequential codes.

  member:               MEM + YY + NNNN     (MEM260001, MEM260002, ...)
  member transaction:   TRX  + last 8 digits of epoch ms + 3 random digits
  company transaction:  CTRX + same

Member codes are read-max-then-increment, so two concurrent creations can
pick the same number. The unique constraint on the column catches that and
`create_with_code` regenerates and retries.
"""
import logging
import random
import time

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models.functions import Length
from django.utils import timezone

from .exceptions import Conflict

logger = logging.getLogger(__name__)

MEMBER_PREFIX = "MEM"
MEMBER_SEQ_WIDTH = 4
TRANSACTION_PREFIX = "TRX"
COMPANY_TRANSACTION_PREFIX = "CTRX"


def member_code_prefix(now=None) -> str:
    now = now or timezone.localtime()
    return f"{MEMBER_PREFIX}{now.year % 100:02d}"


def next_member_code(last_code, prefix) -> str:
    """Code following `last_code` under `prefix` (first code when None)."""
    next_number = 1
    if last_code:
        next_number = int(last_code[len(prefix):]) + 1
    return f"{prefix}{next_number:0{MEMBER_SEQ_WIDTH}d}"


def generate_member_code(now=None) -> str:
    from members.models import Member

    prefix = member_code_prefix(now)
    # longest code first so MEM2610000 ranks above MEM269999
    last = (
        Member.objects.filter(member_code__startswith=prefix)
        .annotate(code_len=Length("member_code"))
        .order_by("-code_len", "-member_code")
        .values_list("member_code", flat=True)
        .first()
    )
    return next_member_code(last, prefix)


def generate_transaction_code(prefix=TRANSACTION_PREFIX) -> str:
    millis = str(int(time.time() * 1000))[-8:]
    return f"{prefix}{millis}{random.randint(0, 999):03d}"


def create_with_code(save, generate, field):
    """
    Call `save(**{field: code})` with a freshly generated code, retrying on a
    unique-constraint collision. Each attempt runs in its own savepoint so a
    collision does not poison the surrounding transaction.
    """
    attempts = 1 + max(0, getattr(settings, "GYMDESK_CODE_RETRY_ATTEMPTS", 1))
    for attempt in range(1, attempts + 1):
        code = generate()
        try:
            with transaction.atomic():
                return save(**{field: code})
        except IntegrityError:
            logger.warning("Generated %s %s collided (attempt %d/%d)", field, code, attempt, attempts)
    raise Conflict(f"Could not allocate a unique {field}, please retry.")
