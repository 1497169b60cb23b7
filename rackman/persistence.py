"""
Persistence boundary: batch inserts with an explicit constraint outcome.

Services never catch IntegrityError themselves. They call save_batch()
or claim_update() and branch on the returned SaveOutcome, so a lost race
is an ordinary result rather than an exception whose message has to be
inspected.
"""

import enum

from django.db import IntegrityError, transaction


class SaveOutcome(enum.Enum):
    SAVED = 'saved'
    UNCHANGED = 'unchanged'
    CONSTRAINT_VIOLATION = 'constraint_violation'


def save_batch(model, objects) -> SaveOutcome:
    """
    Insert all objects in one statement, inside a savepoint.

    On a uniqueness violation the savepoint is rolled back and the
    enclosing transaction stays usable; the caller decides whether to
    abort it. Primary keys are set on the objects when SAVED.
    """
    if not objects:
        return SaveOutcome.SAVED
    try:
        with transaction.atomic():
            model.objects.bulk_create(objects)
    except IntegrityError:
        return SaveOutcome.CONSTRAINT_VIOLATION
    return SaveOutcome.SAVED


def claim_update(queryset, **values) -> SaveOutcome:
    """
    Conditional UPDATE inside a savepoint.

    UNCHANGED means the queryset matched no row (someone else got there
    first); CONSTRAINT_VIOLATION means the new values clash with a
    unique constraint.
    """
    try:
        with transaction.atomic():
            updated = queryset.update(**values)
    except IntegrityError:
        return SaveOutcome.CONSTRAINT_VIOLATION
    return SaveOutcome.SAVED if updated else SaveOutcome.UNCHANGED
