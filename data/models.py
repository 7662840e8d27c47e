from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List
from datetime import datetime, timezone
from enum import Enum

# Date filter value that disables filtering
DATE_FILTER_ALL = "all"

class OrderStatus(str, Enum):
    PENDING = "Pending"
    DELIVERED = "Delivered"

class PaymentMethod(str, Enum):
    NAN = "Nan"
    COD = "COD"
    GPAY = "Gpay"

class SortDirection(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"

class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    quantity: int = Field(ge=1)

class Order(BaseModel):
    """An order as stored by the backend. Field aliases follow its JSON."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(alias="_id")
    name: str = ""
    roll_no: str = Field(default="", alias="rollNo")
    contact: str = ""
    location: str = ""
    total_amount: float = Field(default=0, alias="totalAmount")
    items: List[OrderItem] = Field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    payment: PaymentMethod = PaymentMethod.NAN
    created_at: datetime = Field(alias="createdAt")

    @field_validator("name", "roll_no", "contact", "location", mode="before")
    @classmethod
    def stringify_text(cls, value):
        # Roll and phone numbers can arrive as JSON numbers, blanks as null
        if value is None:
            return ""
        return str(value)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_delivered(self) -> bool:
        return self.status == OrderStatus.DELIVERED
