from typing import List, Optional
from sqlalchemy.orm import Session

from healthaccess.core.security import get_password_hash, verify_password
from healthaccess.crud.base import CRUDBase
from healthaccess.models.user import User, UserRole
from healthaccess.schemas.user import DoctorAvailability, UserCreate, UserBase


class CRUDUser(CRUDBase[User, UserCreate, UserBase]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        db_obj = User(
            email=obj_in.email.strip().lower(),
            hashed_password=get_password_hash(obj_in.password),
            full_name=obj_in.full_name,
            role=obj_in.role.value,
            specialization=obj_in.specialization,
            availability_status=DoctorAvailability.OFFLINE.value if obj_in.role == UserRole.DOCTOR else None,
            age=obj_in.age,
            gender=obj_in.gender,
            is_active=True,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def get_doctors(
        self,
        db: Session,
        *,
        availability: Optional[DoctorAvailability] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[User]:
        query = db.query(User).filter(User.role == UserRole.DOCTOR.value, User.is_active.is_(True))
        if availability is not None:
            query = query.filter(User.availability_status == availability.value)
        return (
            query.order_by(User.full_name)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def set_availability(self, db: Session, *, db_obj: User, availability: DoctorAvailability) -> User:
        db_obj.availability_status = availability.value
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


user = CRUDUser(User)
