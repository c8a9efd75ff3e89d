from fastapi import HTTPException
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session
from typing import Type, TypeVar

T = TypeVar("T")

class ApiModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case (or camelCase) accepted on input"""
    
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class TotalsResponse(ApiModel):
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0

def get_or_404(db: Session, model: Type[T], record_id: int, label: str) -> T:
    record = db.query(model).filter(model.id == record_id).first()
    if not record:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record

def bad_request(error: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(error))
