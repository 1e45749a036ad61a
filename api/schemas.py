"""
API Schemas Module

Request/response models for the JSON checkout API. Field names are camelCase
on the wire because the checkout page's PayPal button script consumes them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderCreate(CamelModel):
    product_id: Optional[str] = None


class OrderCapture(CamelModel):
    product_id: Optional[str] = None


class OrderOut(CamelModel):
    id: str
    status: str


class CaptureOut(CamelModel):
    id: str
    status: str
    payer_email: str
    payer_name: str
    capture_id: str


class ErrorOut(BaseModel):
    error: str
