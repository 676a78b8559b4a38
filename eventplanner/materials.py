"""Material totals and the daily summary.

Material rows are plain mappings using the stored keys ``materialName``,
``quantity`` and ``cost``. Nothing here mutates its input, and malformed
numbers fall back to defaults instead of raising: a missing or non-numeric
cost counts as 0, a missing or non-numeric quantity counts as 1.
"""
import math
from datetime import date, datetime, timedelta, timezone


def _number(value, default):
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number) if number.is_integer() else number


def line_total(item):
    """Return ``quantity * cost`` for one material row."""
    quantity = _number(item.get('quantity'), 1)
    cost = _number(item.get('cost'), 0)
    return quantity * cost


def event_total(materials):
    if not materials:
        return 0
    return sum(line_total(item) for item in materials)


def merge_materials(event_material_lists):
    """Merge the material lists of several events.

    Rows with the same name and the same unit cost are folded into the first
    one seen, summing their quantities. Rows that share a name but not a cost
    stay separate. Costs are compared after the same coercion as
    ``line_total``, so ``'5'`` and ``5`` merge and junk costs count as 0.
    Output keeps the order of first appearance.
    """
    merged = []
    index = {}
    for materials in event_material_lists or []:
        for item in materials or []:
            name = item.get('materialName')
            cost = _number(item.get('cost'), 0)
            key = (name if isinstance(name, str) or name is None else repr(name), cost)
            existing = index.get(key)
            if existing is None:
                entry = {
                    'materialName': name,
                    'quantity': item.get('quantity'),
                    'cost': cost,
                }
                index[key] = entry
                merged.append(entry)
            else:
                existing['quantity'] = (_number(existing['quantity'], 1)
                                        + _number(item.get('quantity'), 1))
    return merged


def daily_summary(material_lists):
    """Merged materials of one day's events, with their grand total."""
    materials = merge_materials(material_lists)
    return materials, event_total(materials)


def adjust_for_timezone(value, utc_offset=None):
    """Shift a local date-time by its UTC offset.

    A calendar day picked at local midnight becomes midnight UTC of that same
    day, so storing it in UTC keeps the intended date. ``utc_offset`` defaults
    to the value's own offset; naive values with no offset are returned as-is.
    """
    if utc_offset is None:
        utc_offset = value.utcoffset() if isinstance(value, datetime) else None
    if not utc_offset:
        return value
    if utc_offset > timedelta(0):
        return value + utc_offset
    return value - abs(utc_offset)


def to_calendar_date(value, utc_offset=None):
    if isinstance(value, datetime):
        if value.tzinfo is None and utc_offset:
            value = value.replace(tzinfo=timezone(utc_offset))
        adjusted = adjust_for_timezone(value, utc_offset)
        if adjusted.tzinfo is not None:
            adjusted = adjusted.astimezone(timezone.utc)
        return adjusted.date()
    if isinstance(value, date):
        return value
    raise TypeError(f'expected a date or datetime, got {type(value).__name__}')
