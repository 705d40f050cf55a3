# app/modules/users/repository.py
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.auth.security import hash_password
from app.shared.database.models import User

class UserRepository:
    """
    Repositorio de usuarios
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[User]:
        return self.db.query(User).order_by(User.full_name).all()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create_user(self, user_data: dict) -> User:
        """Crear nuevo usuario con la contraseña hasheada"""
        user_data = dict(user_data)
        user_data["password_hash"] = hash_password(user_data.pop("password"))

        try:
            db_user = User(**user_data)
            self.db.add(db_user)
            self.db.commit()
            self.db.refresh(db_user)
            return db_user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def update_user(self, user: User, update_data: dict) -> User:
        """Actualizar usuario"""
        update_data = dict(update_data)
        if update_data.get("password"):
            update_data["password_hash"] = hash_password(update_data.pop("password"))
        update_data.pop("password", None)

        try:
            for key, value in update_data.items():
                if hasattr(user, key) and value is not None:
                    setattr(user, key, value)
            self.db.commit()
            self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def delete_user(self, user: User) -> None:
        try:
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e
