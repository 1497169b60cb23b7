"""
Placement codes: globally unique, scannable identifiers for storage units.

Format (GS1-128 style, digits only):
    (11) placement date YYMMDD, UTC
    (01) item base identifier, 14 digits
    (21) random serial, 6 digits

    11 260223 01 00012345678905 21 482913

Collisions are expected to be rare. Generation retries a few times with a
short jittered sleep between attempts and then gives up loudly: running
out of attempts means the serial space is crowded, not that a concurrent
caller got unlucky.
"""

import logging
import random
import re
import secrets
import time
from datetime import timezone as dt_timezone

from django.db.models import Q
from django.utils import timezone

from rackman.conf import rackman_settings
from rackman.exceptions import RackError
from rackman.models.item import Item
from rackman.models.unit import StorageUnit
from rackman.persistence import SaveOutcome, claim_update

logger = logging.getLogger('rackman')

ITEM_CODE_LENGTH = 14
SERIAL_LENGTH = 6
_ITEM_CODE_RE = re.compile(r'\d{14}')


def _digits(length: int) -> str:
    return ''.join(str(secrets.randbelow(10)) for _ in range(length))


def _serial() -> str:
    return _digits(SERIAL_LENGTH)


def _backoff(attempt: int) -> None:
    """Sleep a few tens of milliseconds, growing with the attempt number."""
    base = rackman_settings.CODE_BACKOFF_MS / 1000
    time.sleep(base * attempt * random.uniform(0.5, 1.5))


def build_placement_code(item_code: str, now=None) -> str:
    """One candidate code; uniqueness is NOT checked here."""
    if not item_code or not _ITEM_CODE_RE.fullmatch(item_code):
        raise RackError('INVALID_ITEM_CODE', item_code=item_code)
    now = now or timezone.now()
    date_part = now.astimezone(dt_timezone.utc).strftime('%y%m%d')
    return f"11{date_part}01{item_code}21{_serial()}"


def generate_unique_codes(item_code: str, count: int, now=None) -> list[str]:
    """
    `count` codes unused in the store and distinct from each other.

    Each attempt checks the whole pending batch with one query and keeps
    the winners; only the colliding ones are retried.

    Raises:
        RackError('CODE_GENERATION_FAILED'): attempts exhausted
    """
    max_attempts = rackman_settings.CODE_MAX_ATTEMPTS
    codes: list[str] = []

    for attempt in range(1, max_attempts + 1):
        candidates = []
        for _ in range(count - len(codes)):
            candidate = build_placement_code(item_code, now)
            if candidate not in codes and candidate not in candidates:
                candidates.append(candidate)

        clashes = set(
            StorageUnit.objects.filter(code__in=candidates).values_list('code', flat=True)
        )
        codes.extend(c for c in candidates if c not in clashes)
        if len(codes) == count:
            return codes

        logger.warning(
            "rackman.codes.collision",
            extra={"attempt": attempt, "missing": count - len(codes), "item_code": item_code},
        )
        if attempt < max_attempts:
            _backoff(attempt)

    raise RackError(
        'CODE_GENERATION_FAILED',
        attempts=max_attempts,
        requested=count,
        generated=len(codes),
    )


def ensure_item_code(item: Item) -> str:
    """
    Return the item's 14-digit code, assigning one if it has none.

    Assignment is a conditional UPDATE (only while the code is still
    empty), so two callers racing on the same item agree on one code.
    """
    if item.code:
        if not _ITEM_CODE_RE.fullmatch(item.code):
            raise RackError('INVALID_ITEM_CODE', item_id=item.pk, item_code=item.code)
        return item.code

    max_attempts = rackman_settings.CODE_MAX_ATTEMPTS
    for attempt in range(1, max_attempts + 1):
        candidate = _digits(ITEM_CODE_LENGTH)
        outcome = claim_update(
            Item.objects.filter(Q(code__isnull=True) | Q(code=''), pk=item.pk),
            code=candidate,
        )
        if outcome is SaveOutcome.SAVED:
            item.code = candidate
            logger.info("rackman.item.code_assigned", extra={"item_id": item.pk, "code": candidate})
            return candidate
        if outcome is SaveOutcome.UNCHANGED:
            item.refresh_from_db(fields=['code'])
            if item.code:
                return item.code
            raise RackError('ITEM_NOT_FOUND', item_id=item.pk)
        if attempt < max_attempts:
            _backoff(attempt)

    raise RackError('CODE_GENERATION_FAILED', attempts=max_attempts, item_id=item.pk)
