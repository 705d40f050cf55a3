# app/modules/catalog/repository.py
from typing import List, Optional, Type, TypeVar
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.shared.database.models import Plan, Empresa

CatalogModel = TypeVar("CatalogModel", Plan, Empresa)

class CatalogRepository:
    """
    Repositorio de tablas de referencia (planes y empresas)
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self, model: Type[CatalogModel]) -> List[CatalogModel]:
        """Tabla completa ordenada por label"""
        return self.db.query(model).order_by(model.label).all()

    def get_by_id(self, model: Type[CatalogModel], item_id: int) -> Optional[CatalogModel]:
        return self.db.query(model).filter(model.id == item_id).first()

    def create(self, model: Type[CatalogModel], data: dict) -> CatalogModel:
        try:
            item = model(**data)
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
            return item
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def update(self, item: CatalogModel, data: dict) -> CatalogModel:
        try:
            for key, value in data.items():
                if hasattr(item, key):
                    setattr(item, key, value)
            self.db.commit()
            self.db.refresh(item)
            return item
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def delete(self, item: CatalogModel) -> None:
        try:
            self.db.delete(item)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e
