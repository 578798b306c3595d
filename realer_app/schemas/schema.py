from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

import phonenumbers
from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from models.enums import (
    AccountType,
    BountyStatus,
    NotificationType,
    OfferStatus,
    WaitlistStatus,
)

VIEW_STATE_NAME = re.compile(r"^[a-z0-9_]{1,40}$")


def normalize_phone(value: str) -> str:
    try:
        parsed = phonenumbers.parse(value, "US")
        if not phonenumbers.is_valid_number(parsed):
            raise ValueError("Invalid phone number.")
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
    except phonenumbers.NumberParseException:
        raise ValueError("Invalid phone number format. Use e.g. +16502530000")


def required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Field cannot be blank.")
    return value


def clean_comparables(values: List[str]) -> List[str]:
    return [v.strip() for v in values if v and v.strip()]


class ProfileCreate(BaseModel):
    email: EmailStr
    password: str = Field(
        ..., min_length=8, json_schema_extra={"type": "string", "format": "password"}
    )
    name: Optional[str] = None
    phone: Optional[str] = None
    account_type: AccountType = AccountType.BUYER

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]):
        if value is None or not value.strip():
            return None
        return normalize_phone(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str):
        errors = []
        if not re.search(r"[A-Za-z]", v):
            errors.append("letter")
        if not re.search(r"\d", v):
            errors.append("number")
        if errors:
            raise ValueError("Password must contain: " + ", ".join(errors))
        return v


class UserLoginInput(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class ProfileOut(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    account_type: AccountType
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    account_type: Optional[AccountType] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]):
        if value is None or not value.strip():
            return None
        return normalize_phone(value)


class ListingCreate(BaseModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    market_price: Decimal = Field(..., gt=0)
    beds: int = Field(..., ge=0)
    baths: Decimal = Field(..., ge=0)
    sqft: int = Field(..., gt=0)
    property_type: str = Field(..., min_length=1)
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    reward: Optional[Decimal] = None
    after_repair_value: Optional[Decimal] = None
    estimated_rehab: Optional[Decimal] = None
    comparable_addresses: List[str] = Field(default_factory=list, max_length=3)
    additional_images_link: Optional[str] = None

    @field_validator("address", "city", "state", "zip_code", "property_type")
    @classmethod
    def strip_required(cls, value: str):
        return required_text(value)

    @field_validator("comparable_addresses")
    @classmethod
    def drop_blank_comparables(cls, value: List[str]):
        return clean_comparables(value)

    @field_validator("reward")
    @classmethod
    def positive_reward_only(cls, value: Optional[Decimal]):
        if value is None or value <= 0:
            return None
        return value


class ListingUpdate(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0)
    market_price: Optional[Decimal] = Field(default=None, gt=0)
    beds: Optional[int] = Field(default=None, ge=0)
    baths: Optional[Decimal] = Field(default=None, ge=0)
    sqft: Optional[int] = Field(default=None, gt=0)
    property_type: Optional[str] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    reward: Optional[Decimal] = None
    after_repair_value: Optional[Decimal] = None
    estimated_rehab: Optional[Decimal] = None
    comparable_addresses: Optional[List[str]] = Field(default=None, max_length=3)
    additional_images_link: Optional[str] = None

    @field_validator("address", "city", "state", "zip_code", "property_type")
    @classmethod
    def strip_required(cls, value: Optional[str]):
        # omitted fields stay untouched; sent ones may not be blank
        if value is None:
            return None
        return required_text(value)

    @field_validator("comparable_addresses")
    @classmethod
    def drop_blank_comparables(cls, value: Optional[List[str]]):
        if value is None:
            return None
        return clean_comparables(value)


class ListingFilters(BaseModel):
    location: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_beds: Optional[int] = None
    min_baths: Optional[Decimal] = None
    property_type: Optional[str] = None
    min_below_market: Optional[int] = None
    limit: int = Field(default=50, ge=1, le=200)


class ListingTextIn(BaseModel):
    text: str = Field(..., max_length=10000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return required_text(value)


class ListingDraftOut(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    beds: Optional[int] = None
    baths: Optional[float] = None
    sqft: Optional[int] = None
    property_type: Optional[str] = None
    price: Optional[float] = None
    market_price: Optional[float] = None
    after_repair_value: Optional[float] = None
    estimated_rehab: Optional[float] = None
    description: Optional[str] = None
    missing: List[str] = []


class ListingOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    price: float
    market_price: float
    below_market: int
    location: str
    full_address: str
    city: str
    state: str
    zip_code: str
    beds: int
    baths: float
    sqft: int
    property_type: str
    images: List[str] = []
    reward: Optional[float] = None
    after_repair_value: Optional[float] = None
    estimated_rehab: Optional[float] = None
    comparable_addresses: List[str] = []
    additional_images_link: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ListingSummary(BaseModel):
    id: uuid.UUID
    title: str
    location: str
    price: float
    market_price: float
    below_market: int
    image: Optional[str] = None
    reward: Optional[float] = None


class ImageOut(BaseModel):
    public_id: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[str] = None
    bytes: Optional[int] = None


class ConversationCreate(BaseModel):
    other_user_id: uuid.UUID


class ConversationIdOut(BaseModel):
    id: uuid.UUID


class ConversationOut(BaseModel):
    id: uuid.UUID
    participant1: uuid.UUID
    participant2: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ConversationPropertyOut(BaseModel):
    id: uuid.UUID
    title: str
    image: Optional[str] = None


class LatestMessageOut(BaseModel):
    content: str
    created_at: Optional[datetime] = None
    is_read: bool
    sender_id: Optional[uuid.UUID] = None


class ConversationSummaryOut(BaseModel):
    id: uuid.UUID
    other_user_id: uuid.UUID
    other_user_name: str
    other_user_role: AccountType
    latest_message: LatestMessageOut
    property: Optional[ConversationPropertyOut] = None
    updated_at: Optional[datetime] = None


class ConversationListOut(BaseModel):
    conversations: List[ConversationSummaryOut]
    unread_count: int


class MessageCreate(BaseModel):
    content: str
    related_offer_id: Optional[uuid.UUID] = None
    property_id: Optional[uuid.UUID] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str):
        if not value or not value.strip():
            raise ValueError("Message content cannot be empty.")
        return value.strip()


class MessageOut(BaseModel):
    id: uuid.UUID
    conversation_id: uuid.UUID
    sender_id: uuid.UUID
    content: str
    is_read: bool
    related_offer_id: Optional[uuid.UUID] = None
    property_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    is_mine: bool = False

    model_config = {"from_attributes": True}


class MessageGroupOut(BaseModel):
    day: date
    messages: List[MessageOut]


class CountOut(BaseModel):
    count: int


class WaitlistCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str):
        return normalize_phone(value)


class WaitlistOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    property_id: uuid.UUID
    name: str
    email: str
    phone: str
    status: WaitlistStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class WaitlistWithListingOut(WaitlistOut):
    listing: Optional[ListingSummary] = None


class WaitlistStatusOut(BaseModel):
    property_id: uuid.UUID
    status: Optional[WaitlistStatus] = None


class WaitlistDecision(BaseModel):
    status: WaitlistStatus

    @field_validator("status")
    @classmethod
    def decision_only(cls, value: WaitlistStatus):
        if value == WaitlistStatus.PENDING:
            raise ValueError("Decision must be accepted or declined.")
        return value


class SellerContactOut(BaseModel):
    property_id: uuid.UUID
    visible: bool
    status: Optional[WaitlistStatus] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class BountyAdvance(BaseModel):
    target: Optional[BountyStatus] = None
    buyer_name: Optional[str] = None
    buyer_id: Optional[uuid.UUID] = None


class BountyClaimOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    property_id: uuid.UUID
    buyer_id: Optional[uuid.UUID] = None
    status: BountyStatus
    reward_amount: float
    status_details: dict = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BountyClaimDetailOut(BountyClaimOut):
    listing: Optional[ListingSummary] = None
    progress_index: int
    progress_percent: int
    next_status: Optional[BountyStatus] = None


class PayoutSummaryOut(BaseModel):
    total_paid: float
    total_pending: float
    closed_count: int
    open_count: int


class NotificationCreate(BaseModel):
    user_id: uuid.UUID
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    properties: Optional[dict[str, Any]] = None


class NotificationOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    message: str
    type: NotificationType
    read: bool
    properties: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class OfferCreate(BaseModel):
    offer_amount: Optional[Decimal] = Field(default=None, gt=0)
    proof_of_funds_url: Optional[str] = None


class OfferDecision(BaseModel):
    status: OfferStatus

    @field_validator("status")
    @classmethod
    def decision_only(cls, value: OfferStatus):
        if value == OfferStatus.PENDING:
            raise ValueError("Decision must be accepted or declined.")
        return value


class OfferOut(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    user_id: uuid.UUID
    seller_id: uuid.UUID
    offer_amount: float
    status: OfferStatus
    is_interested: bool
    proof_of_funds_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LikeStateOut(BaseModel):
    property_id: uuid.UUID
    liked: bool


class LocationAlertCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    location: str = Field(..., min_length=1)
    phone: Optional[str] = None
    max_price: Optional[Decimal] = Field(default=None, gt=0)
    property_type: Optional[str] = None
    is_agent: bool = False

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]):
        if value is None or not value.strip():
            return None
        return normalize_phone(value)


class LocationAlertOut(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    location: str
    max_price: Optional[float] = None
    property_type: Optional[str] = None
    is_agent: bool
    active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BlogPostCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    image: Optional[str] = None
    property_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def default_excerpt(self):
        if not self.excerpt:
            object.__setattr__(self, "excerpt", self.content[:150])
        return self


class BlogPostOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    property_id: Optional[uuid.UUID] = None
    title: str
    excerpt: Optional[str] = None
    content: str
    author: str
    image: Optional[str] = None
    read_time: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ViewStateIn(BaseModel):
    value: Any


class ViewStateOut(BaseModel):
    name: str
    value: Any = None


class ContractUrlOut(BaseModel):
    url: str
