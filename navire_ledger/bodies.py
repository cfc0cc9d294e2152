"""Request bodies accepted by the ledger HTTP interface."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AddExpenseData(BaseModel):
    """Amount and kind of a bank operation."""

    model_config = ConfigDict(populate_by_name=True)

    amount: float
    operation_type: str = Field(alias="operationType")


class AddExpenseRequest(BaseModel):
    """Body of a request to record an expense."""

    data: AddExpenseData


class AdaptivePricing(BaseModel):
    """Adaptive pricing settings of a checkout session."""

    enabled: bool


class AutomaticTax(BaseModel):
    """Automatic tax settings of a checkout session."""

    enabled: bool
    liability: Optional[str] = None
    status: Optional[str] = None


class Label(BaseModel):
    """Label of a custom checkout field."""

    custom: str
    type: str


class TextValue(BaseModel):
    """Value typed into a text custom field."""

    value: str


class DropdownOption(BaseModel):
    """One choice of a dropdown custom field."""

    label: str
    value: str


class Dropdown(BaseModel):
    """A dropdown custom field and the value chosen in it."""

    options: List[DropdownOption]
    value: str


class CustomField(BaseModel):
    """A custom field filled in at checkout."""

    key: str
    label: Label
    text: Optional[TextValue] = None
    dropdown: Optional[Dropdown] = None


class Address(BaseModel):
    """Postal address of a customer."""

    city: Optional[str] = None
    country: str
    line1: Optional[str] = None
    line2: Optional[str] = None
    postal_code: Optional[str] = None
    state: Optional[str] = None


class CustomerDetails(BaseModel):
    """Who paid."""

    address: Address
    email: str
    name: str
    phone: Optional[str] = None
    tax_exempt: str
    tax_ids: List[str]


class StripeObject(BaseModel):
    """The completed checkout session carried by a payment notification."""

    id: str
    object: str
    adaptive_pricing: AdaptivePricing
    amount_subtotal: int
    amount_total: int
    automatic_tax: AutomaticTax
    custom_fields: List[CustomField]
    customer_details: CustomerDetails


class PaymentReceivedData(BaseModel):
    """Envelope around the checkout session."""

    object: StripeObject


class PaymentReceivedRequest(BaseModel):
    """Body of a payment notification."""

    data: PaymentReceivedData