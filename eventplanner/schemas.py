from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from eventplanner.errors import DecodeError
from eventplanner.materials import event_total

EventType = Literal['Wedding', 'Birthday', 'Corporate', 'Others']


class MaterialRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    material_name: str = Field(alias='materialName', min_length=1)
    quantity: int | float = Field(gt=0)
    cost: int | float = Field(ge=0)

    def to_wire(self):
        return self.model_dump(by_alias=True)


class EventRecord(BaseModel):
    """An event read back from the store and checked against the schema."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    name: str = Field(min_length=2, max_length=255)
    address: str = Field(min_length=10, max_length=255)
    date: date
    event_type: EventType = Field(alias='eventType')
    material: list[MaterialRecord] = Field(default_factory=list)
    username: str = Field(min_length=1)

    @property
    def materials(self):
        return [item.to_wire() for item in self.material]

    @property
    def total(self):
        return event_total(self.materials)

    def to_wire(self):
        data = self.model_dump(by_alias=True, mode='json')
        data['total'] = self.total
        return data


class EventPayload(BaseModel):
    """Event submitted as JSON: no id, no owner, date or date-time."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2, max_length=255)
    address: str = Field(min_length=10, max_length=255)
    date: datetime | date
    event_type: EventType = Field(alias='eventType')
    material: list[MaterialRecord] = Field(default_factory=list)

    @field_validator('date', mode='before')
    @classmethod
    def parse_iso(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if 'T' in value or ' ' in value:
                return datetime.fromisoformat(value)
            return date.fromisoformat(value)
        return value


_event_list = TypeAdapter(list[EventRecord])


def decode_events(rows):
    """Validate every row or none of them.

    A single bad record raises DecodeError for the whole result set.
    """
    try:
        return _event_list.validate_python(list(rows))
    except ValidationError as e:
        raise DecodeError(f'{e.error_count()} invalid field(s) in store result',
                          errors=e.errors()) from e


def decode_event(row):
    if row is None:
        return None
    return decode_events([row])[0]
