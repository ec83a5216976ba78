import uuid
from sqlalchemy import Column, String, DateTime, Date, Float, Integer, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from healthaccess.db.base import Base
from healthaccess.utils.timezone import utcnow_naive


class Medicine(Base):
    """Pharmacy catalogue entry with its current stock."""
    __tablename__ = "medicines"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, unique=True, index=True)
    generic_name = Column(String, nullable=True)
    category = Column(String(50), nullable=False, default="General", index=True)
    manufacturer = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    # Usual regimen shown next to the item
    dosage = Column(String, nullable=True)
    frequency = Column(String, nullable=True)

    unit = Column(String(20), nullable=False, default="units")
    price = Column(Float, nullable=False, default=0.0)
    stock = Column(Integer, nullable=False, default=0)
    reorder_level = Column(Integer, nullable=False, default=10)
    expiry_date = Column(Date, nullable=True)
    is_discontinued = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    movements = relationship(
        "StockMovement",
        back_populates="medicine",
        cascade="all, delete-orphan",
        order_by="StockMovement.created_at.desc()",
    )


class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    medicine_id = Column(String(36), ForeignKey("medicines.id"), nullable=False, index=True)
    recorded_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    movement_type = Column(String(20), nullable=False)  # added, dispensed, expired, returned
    quantity = Column(Integer, nullable=False)
    stock_after = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow_naive)

    medicine = relationship("Medicine", back_populates="movements")
