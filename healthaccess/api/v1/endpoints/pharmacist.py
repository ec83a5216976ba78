import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.models.medicine import Medicine
from healthaccess.schemas.medicine import (
    MedicineCreate,
    MedicineItem,
    MedicineList,
    MedicineUpdate,
    StockMovement,
    StockMovementCreate,
    StockStatus,
)
from healthaccess.schemas.user import SessionContext
from healthaccess.services import inventory

logger = logging.getLogger(__name__)

router = APIRouter()


def to_item(medicine: Medicine) -> MedicineItem:
    status = inventory.stock_status(medicine.stock, medicine.reorder_level, medicine.is_discontinued)
    return MedicineItem.model_validate(
        {
            **{column.name: getattr(medicine, column.name) for column in Medicine.__table__.columns},
            "stock_status": status,
            "low_stock": status in (StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK),
        }
    )


def get_medicine_or_404(db: Session, medicine_id: str) -> Medicine:
    medicine = crud.medicine.get(db, id=medicine_id)
    if medicine is None:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return medicine


@router.get("/medicines", response_model=MedicineList)
def read_medicines(
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_pharmacist),
    status: Optional[StockStatus] = None,
    category: Optional[str] = None,
    skip: int = 0,
    limit: int = Query(100, le=500),
) -> Any:
    """
    The pharmacy catalogue, optionally narrowed to one category or stock status.
    """
    items, total = crud.medicine.get_filtered(db, category=category, status=status, skip=skip, limit=limit)
    return MedicineList(medicines=[to_item(m) for m in items], total=total)


@router.get("/medicines/search", response_model=MedicineList)
def search_medicines(
    query: str = Query(..., min_length=1),
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_pharmacist),
) -> Any:
    items = crud.medicine.search(db, query=query)
    return MedicineList(medicines=[to_item(m) for m in items], total=len(items))


@router.get("/medicines/low-stock", response_model=MedicineList)
def read_low_stock(
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_pharmacist),
) -> Any:
    items = crud.medicine.get_low_stock(db)
    return MedicineList(medicines=[to_item(m) for m in items], total=len(items))


@router.post("/medicines", response_model=MedicineItem, status_code=201)
def create_medicine(
    *,
    db: Session = Depends(deps.get_db),
    medicine_in: MedicineCreate,
    session: SessionContext = Depends(deps.get_current_pharmacist),
) -> Any:
    if crud.medicine.get_by_name(db, name=medicine_in.name) is not None:
        raise HTTPException(status_code=400, detail="A medicine with this name already exists")
    medicine = crud.medicine.create(db, obj_in=medicine_in)
    logger.info(f"Medicine {medicine.id} ({medicine.name}) added by {session.user_id}")
    return to_item(medicine)


@router.get("/medicines/{medicine_id}", response_model=MedicineItem)
def read_medicine(
    medicine_id: str,
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_pharmacist),
) -> Any:
    return to_item(get_medicine_or_404(db, medicine_id))


@router.put("/medicines/{medicine_id}", response_model=MedicineItem)
def update_medicine(
    medicine_id: str,
    medicine_in: MedicineUpdate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_pharmacist),
) -> Any:
    medicine = get_medicine_or_404(db, medicine_id)
    changes = medicine_in.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        clash = crud.medicine.get_by_name(db, name=changes["name"])
        if clash is not None and clash.id != medicine.id:
            raise HTTPException(status_code=400, detail="A medicine with this name already exists")
    if "stock" in changes and changes["stock"] != medicine.stock:
        logger.info(f"Medicine {medicine.id} stock set {medicine.stock} -> {changes['stock']} by {session.user_id}")
    medicine = crud.medicine.update(db, db_obj=medicine, obj_in=changes)
    return to_item(medicine)


@router.post("/medicines/{medicine_id}/stock", response_model=MedicineItem)
def record_stock_movement(
    medicine_id: str,
    movement_in: StockMovementCreate,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_pharmacist),
) -> Any:
    """
    Add, dispense, expire or return units. Outbound movements cannot take the
    stock below zero.
    """
    medicine = get_medicine_or_404(db, medicine_id)
    stock_after = inventory.apply_movement(medicine.stock, movement_in.type, movement_in.quantity)
    crud.medicine.record_movement(
        db,
        db_obj=medicine,
        movement_type=movement_in.type,
        quantity=movement_in.quantity,
        stock_after=stock_after,
        recorded_by_id=session.user_id,
        notes=movement_in.notes,
    )
    item = to_item(medicine)
    if item.low_stock:
        logger.warning(f"Medicine {medicine.id} ({medicine.name}) is {item.stock_status.value}: {stock_after} left")
    return item


@router.get("/medicines/{medicine_id}/stock", response_model=List[StockMovement])
def read_stock_movements(
    medicine_id: str,
    db: Session = Depends(deps.get_db),
    _: SessionContext = Depends(deps.get_current_pharmacist),
    skip: int = 0,
    limit: int = 100,
) -> Any:
    get_medicine_or_404(db, medicine_id)
    return crud.medicine.get_movements(db, medicine_id=medicine_id, skip=skip, limit=limit)


@router.delete("/medicines/{medicine_id}", status_code=204)
def delete_medicine(
    medicine_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_pharmacist),
):
    medicine = get_medicine_or_404(db, medicine_id)
    crud.medicine.remove(db, id=medicine.id)
    logger.info(f"Medicine {medicine_id} removed by {session.user_id}")
