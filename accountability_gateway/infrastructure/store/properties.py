"""Typed property values, readers, and filter/sort documents for the record store"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from accountability_gateway.infrastructure.store.base import Filter, Record, Sort
from accountability_gateway.infrastructure.store.schema import TITLE
from accountability_gateway.utils.money import to_decimal


# Writers

def date_value(value: date) -> Dict[str, Any]:
    return {"date": {"start": value.isoformat()}}


def number_value(value) -> Dict[str, Any]:
    if isinstance(value, Decimal):
        value = float(value)
    return {"number": value}


def select_value(name: str) -> Dict[str, Any]:
    return {"select": {"name": name}}


def title_value(text: str) -> Dict[str, Any]:
    return {"title": [{"text": {"content": text}}]}


# Readers

def _prop(record: Record, name: str) -> Dict[str, Any]:
    return record.get("properties", {}).get(name) or {}


def read_date(record: Record, name: str) -> Optional[date]:
    value = _prop(record, name).get("date")
    if not value or not value.get("start"):
        return None
    # Date-time values carry a time part; keep the calendar date only
    return date.fromisoformat(value["start"][:10])


def read_number(record: Record, name: str) -> Optional[float]:
    return _prop(record, name).get("number")


def read_decimal(record: Record, name: str) -> Decimal:
    return to_decimal(read_number(record, name))


def read_select(record: Record, name: str) -> Optional[str]:
    value = _prop(record, name).get("select")
    return value.get("name") if value else None


def read_title(record: Record, name: str = TITLE) -> str:
    parts = _prop(record, name).get("title") or []
    if not parts:
        return "Unnamed"
    first = parts[0]
    return first.get("plain_text") or first.get("text", {}).get("content") or "Unnamed"


# Filters and sorts

def select_equals(prop: str, name: str) -> Filter:
    return {"property": prop, "select": {"equals": name}}


def date_equals(prop: str, value: date) -> Filter:
    return {"property": prop, "date": {"equals": value.isoformat()}}


def date_before(prop: str, value: date) -> Filter:
    return {"property": prop, "date": {"before": value.isoformat()}}


def date_on_or_after(prop: str, value: date) -> Filter:
    return {"property": prop, "date": {"on_or_after": value.isoformat()}}


def date_on_or_before(prop: str, value: date) -> Filter:
    return {"property": prop, "date": {"on_or_before": value.isoformat()}}


def all_of(*filters: Filter) -> Filter:
    return {"and": list(filters)}


def ascending(prop: str) -> List[Sort]:
    return [{"property": prop, "direction": "ascending"}]


def descending(prop: str) -> List[Sort]:
    return [{"property": prop, "direction": "descending"}]
