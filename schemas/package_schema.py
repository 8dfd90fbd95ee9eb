# package_schema.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class PackageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(default="USD", max_length=10)
    features: List[str] = Field(default_factory=list)
    active: bool = True
    display_order: int = 0


class PackageUpdate(BaseModel):
    """Field update set for a package; omitted fields are left as they are."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(default=None, max_length=10)
    features: Optional[List[str]] = None
    active: Optional[bool] = None
    display_order: Optional[int] = None


class PackageRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    # NUMERIC(10,2) in storage, a JSON number on the wire
    price: float
    currency: str
    features: List[str] = Field(default_factory=list)
    active: bool
    display_order: int
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
