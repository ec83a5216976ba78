from typing import List, Optional, Tuple
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from healthaccess.crud.base import CRUDBase
from healthaccess.models.medicine import Medicine, StockMovement
from healthaccess.schemas.medicine import MedicineCreate, MedicineUpdate, StockMovementType, StockStatus


def stock_status_clause(status: StockStatus):
    """SQL twin of ``services.inventory.stock_status``."""
    if status == StockStatus.DISCONTINUED:
        return Medicine.is_discontinued.is_(True)
    active = Medicine.is_discontinued.is_(False)
    if status == StockStatus.OUT_OF_STOCK:
        return and_(active, Medicine.stock <= 0)
    if status == StockStatus.LOW_STOCK:
        return and_(active, Medicine.stock > 0, Medicine.stock <= Medicine.reorder_level)
    return and_(active, Medicine.stock > Medicine.reorder_level)


class CRUDMedicine(CRUDBase[Medicine, MedicineCreate, MedicineUpdate]):
    def get_by_name(self, db: Session, *, name: str) -> Optional[Medicine]:
        return db.query(Medicine).filter(func.lower(Medicine.name) == name.strip().lower()).first()

    def create(self, db: Session, *, obj_in: MedicineCreate) -> Medicine:
        db_obj = Medicine(**obj_in.model_dump())
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_filtered(
        self,
        db: Session,
        *,
        category: Optional[str] = None,
        status: Optional[StockStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Medicine], int]:
        query = db.query(Medicine)
        if category:
            query = query.filter(Medicine.category == category)
        if status is not None:
            query = query.filter(stock_status_clause(status))
        total = query.count()
        items = query.order_by(Medicine.name).offset(skip).limit(limit).all()
        return items, total

    def search(self, db: Session, *, query: str, limit: int = 20) -> List[Medicine]:
        pattern = f"%{query.strip()}%"
        return (
            db.query(Medicine)
            .filter(or_(Medicine.name.ilike(pattern), Medicine.generic_name.ilike(pattern)))
            .order_by(Medicine.name)
            .limit(limit)
            .all()
        )

    def get_low_stock(self, db: Session) -> List[Medicine]:
        """Active items at or below their reorder level, emptiest first."""
        return (
            db.query(Medicine)
            .filter(Medicine.is_discontinued.is_(False), Medicine.stock <= Medicine.reorder_level)
            .order_by(Medicine.stock, Medicine.name)
            .all()
        )

    def record_movement(
        self,
        db: Session,
        *,
        db_obj: Medicine,
        movement_type: StockMovementType,
        quantity: int,
        stock_after: int,
        recorded_by_id: str,
        notes: Optional[str] = None,
    ) -> StockMovement:
        db_obj.stock = stock_after
        movement = StockMovement(
            medicine_id=db_obj.id,
            recorded_by_id=recorded_by_id,
            movement_type=movement_type.value,
            quantity=quantity,
            stock_after=stock_after,
            notes=notes,
        )
        db.add(db_obj)
        db.add(movement)
        db.commit()
        db.refresh(db_obj)
        db.refresh(movement)
        return movement

    def get_movements(
        self, db: Session, *, medicine_id: str, skip: int = 0, limit: int = 100
    ) -> List[StockMovement]:
        return (
            db.query(StockMovement)
            .filter(StockMovement.medicine_id == medicine_id)
            .order_by(StockMovement.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )


medicine = CRUDMedicine(Medicine)
