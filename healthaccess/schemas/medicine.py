from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class StockStatus(str, Enum):
    AVAILABLE = "available"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"
    DISCONTINUED = "discontinued"


class StockMovementType(str, Enum):
    ADDED = "added"
    DISPENSED = "dispensed"
    EXPIRED = "expired"
    RETURNED = "returned"


class MedicineCreate(BaseModel):
    # Accepts both the form field names and the camelCase service payload
    name: str = Field(..., alias="medicineName")
    generic_name: Optional[str] = Field(default=None, alias="genericName")
    category: str = "General"
    manufacturer: Optional[str] = None
    description: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    unit: str = "units"
    price: float = Field(default=0.0, ge=0)
    stock: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=10, ge=0, alias="reorderLevel")
    expiry_date: Optional[date] = Field(default=None, alias="expiryDate")

    class Config:
        populate_by_name = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Medicine name is required")
        return value


class MedicineUpdate(BaseModel):
    name: Optional[str] = Field(default=None, alias="medicineName")
    generic_name: Optional[str] = Field(default=None, alias="genericName")
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    description: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    reorder_level: Optional[int] = Field(default=None, ge=0, alias="reorderLevel")
    expiry_date: Optional[date] = Field(default=None, alias="expiryDate")
    is_discontinued: Optional[bool] = Field(default=None, alias="isDiscontinued")

    class Config:
        populate_by_name = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Medicine name is required")
        return value


class StockMovementCreate(BaseModel):
    quantity: int = Field(..., gt=0)
    type: StockMovementType
    notes: Optional[str] = None


class StockMovement(BaseModel):
    id: str
    medicine_id: str
    movement_type: StockMovementType
    quantity: int
    stock_after: int
    notes: Optional[str] = None
    recorded_by_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class MedicineItem(BaseModel):
    id: str
    name: str
    generic_name: Optional[str] = None
    category: str
    manufacturer: Optional[str] = None
    description: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    unit: str
    price: float
    stock: int
    reorder_level: int
    expiry_date: Optional[date] = None
    is_discontinued: bool
    stock_status: StockStatus
    low_stock: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class MedicineList(BaseModel):
    medicines: List[MedicineItem]
    total: int
