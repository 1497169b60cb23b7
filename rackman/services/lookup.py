"""
Lookups: resolve items and storage units from ids or scanned codes.

Scanners are inconsistent about the GS1 "01" application identifier:
some emit the bare 14-digit GTIN, some prefix it. Lookups try the exact
value first, then the obvious variants.
"""

import logging
import re

from rackman.exceptions import RackError
from rackman.models.item import Item
from rackman.models.unit import StorageUnit

logger = logging.getLogger('rackman')

_FOURTEEN = re.compile(r'\d{14}')
_SIXTEEN_WITH_AI = re.compile(r'01\d{14}')


def code_variants(code: str) -> list[str]:
    """Exact code first, then with/without the '01' prefix."""
    variants = [code]
    if _FOURTEEN.fullmatch(code):
        variants.append('01' + code)
    if _SIXTEEN_WITH_AI.fullmatch(code):
        variants.append(code[2:])
    return variants


def find_item(item_or_code) -> Item:
    """
    Resolve an Item from an instance, a primary key, or a code.

    Raises:
        RackError('ITEM_NOT_FOUND')
    """
    if isinstance(item_or_code, Item):
        return item_or_code

    if isinstance(item_or_code, int):
        item = Item.objects.filter(pk=item_or_code).first()
        if item is None:
            raise RackError('ITEM_NOT_FOUND', item_id=item_or_code)
        return item

    code = str(item_or_code or '').strip()
    for variant in code_variants(code) if code else []:
        item = Item.objects.filter(code=variant).first()
        if item is not None:
            if variant != code:
                logger.info("rackman.lookup.item_variant", extra={"scanned": code, "matched": variant})
            return item
    raise RackError('ITEM_NOT_FOUND', item_code=code)


def find_unit(code: str, queryset=None) -> StorageUnit:
    """
    Resolve a StorageUnit by placement code (lenient on the '01' prefix).

    Args:
        code: Scanned or typed code
        queryset: Base queryset (e.g. select_for_update()); defaults to all

    Raises:
        RackError('UNIT_NOT_FOUND')
    """
    qs = queryset if queryset is not None else StorageUnit.objects.all()
    qs = qs.select_related('item', 'rack')
    code = str(code or '').strip()
    for variant in code_variants(code) if code else []:
        unit = qs.filter(code=variant).first()
        if unit is not None:
            return unit
    raise RackError('UNIT_NOT_FOUND', unit_code=code)
