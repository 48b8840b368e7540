"""Request and response schemas for the JSON API.

Field names are snake_case in Python and camelCase on the wire. Request
models are validated with :func:`load`; update models leave unsent fields
unset so ``model_dump(exclude_unset=True)`` yields a partial update.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Literal, Optional

from flask import request
from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PositiveInt,
    StrictBool,
    StrictStr,
    StringConstraints,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .accounting import money_str
from .errors import ValidationFailure

JobStatus = Literal['open', 'done', 'cancelled']
InvoiceStatus = Literal['created', 'sent', 'paid']

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Amount = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
Money = Annotated[Decimal, PlainSerializer(money_str, return_type=str)]


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel), from_attributes=True)


def load(schema: type[RequestModel]) -> RequestModel:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailure('Request body must be a JSON object')
    return schema.model_validate(data)


def changes(model: RequestModel) -> dict:
    return model.model_dump(exclude_unset=True)


def dump(schema: type[ResponseModel], obj) -> dict:
    return schema.model_validate(obj).model_dump(mode='json', by_alias=True)


def check_filter(adapter: TypeAdapter, value, field: str):
    try:
        return adapter.validate_python(value)
    except ValueError:
        raise ValidationFailure(f'{field} is not a known value', field=field)


job_status_adapter = TypeAdapter(JobStatus)
invoice_status_adapter = TypeAdapter(InvoiceStatus)


# requests

class SettingsUpdate(RequestModel):
    company_name: NonEmptyStr = None
    address: NonEmptyStr = None
    email: NonEmptyStr = None
    website: NonEmptyStr = None
    next_invoice_number: PositiveInt = None


class PropertyManagerUpdate(RequestModel):
    name: NonEmptyStr = None
    address: NonEmptyStr = None
    phone: Optional[StrictStr] = None
    email: Optional[StrictStr] = None
    notes: Optional[StrictStr] = None


class PropertyManagerCreate(PropertyManagerUpdate):
    name: NonEmptyStr
    address: NonEmptyStr


class CompanyUpdate(RequestModel):
    name: NonEmptyStr = None
    contact_person: Optional[StrictStr] = None
    address: NonEmptyStr = None
    phone: Optional[StrictStr] = None
    email: Optional[StrictStr] = None
    tags: list[StrictStr] = None
    vat_id: Optional[StrictStr] = None
    payment_terms_days: Optional[int] = Field(default=None, ge=0)
    notes: Optional[StrictStr] = None
    is_active: StrictBool = None

    @field_validator('tags', mode='before')
    @classmethod
    def split_tags(cls, value):
        # the form sends "Installateur, Elektriker"
        if isinstance(value, str):
            value = value.split(',')
        if isinstance(value, list) and all(isinstance(t, str) for t in value):
            return [t.strip() for t in value if t.strip()]
        return value


class CompanyCreate(CompanyUpdate):
    name: NonEmptyStr
    address: NonEmptyStr


class JobUpdate(RequestModel):
    property_manager_id: Optional[PositiveInt] = None
    company_id: Optional[PositiveInt] = None
    location_address: NonEmptyStr = None
    trade: NonEmptyStr = None
    description: Optional[StrictStr] = None
    status: JobStatus = None
    referral_fee: Amount = None
    internal_notes: Optional[StrictStr] = None


class JobCreate(JobUpdate):
    location_address: NonEmptyStr
    trade: NonEmptyStr


class JobReportUpsert(RequestModel):
    steps: Optional[StrictStr] = None
    times: Optional[StrictStr] = None
    material: Optional[StrictStr] = None
    result: Optional[StrictStr] = None
    photos_url: Optional[StrictStr] = None


class CooperationToggle(RequestModel):
    company_id: PositiveInt
    property_manager_id: PositiveInt
    active: Optional[StrictBool] = None


class GenerateInvoices(RequestModel):
    month_year: StrictStr


class PayInvoice(RequestModel):
    paid_at: datetime

    @field_validator('paid_at')
    @classmethod
    def as_naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


# responses

class SettingsOut(ResponseModel):
    id: int
    company_name: str
    address: str
    email: str
    website: str
    next_invoice_number: int


class PropertyManagerOut(ResponseModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class CompanyOut(ResponseModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    tags: list[str] = []
    vat_id: Optional[str] = None
    payment_terms_days: Optional[int] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None

    @field_validator('tags', mode='before')
    @classmethod
    def no_tags(cls, value):
        return value or []


class CooperationOut(ResponseModel):
    id: int
    company_id: int
    property_manager_id: int


class JobReportOut(ResponseModel):
    id: int
    job_id: int
    steps: Optional[str] = None
    times: Optional[str] = None
    material: Optional[str] = None
    result: Optional[str] = None
    photos_url: Optional[str] = None


class JobOut(ResponseModel):
    id: int
    job_number: str
    created_at: Optional[datetime] = None
    property_manager_id: Optional[int] = None
    company_id: Optional[int] = None
    location_address: str
    trade: str
    description: Optional[str] = None
    status: str
    referral_fee: Money
    internal_notes: Optional[str] = None
    invoice_id: Optional[int] = None


class JobListOut(JobOut):
    company: Optional[CompanyOut] = None
    property_manager: Optional[PropertyManagerOut] = None


class JobDetailOut(JobOut):
    report: Optional[JobReportOut] = None


class InvoiceOut(ResponseModel):
    id: int
    invoice_number: str
    date: Optional[datetime] = None
    month_year: str
    company_id: Optional[int] = None
    total_amount: Money
    status: str
    paid_at: Optional[datetime] = None


class InvoiceListOut(InvoiceOut):
    company: Optional[CompanyOut] = None
