import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from models.category import Category
from models.money import Money, PositiveAmount


class BudgetCreate(BaseModel):
    amount: PositiveAmount
    category: Category
    date: datetime.date

class BudgetUpdate(BudgetCreate):
    version: Optional[int] = None

class Budget(BaseModel):
    id: int
    amount: Money
    category: Category
    date: datetime.date
    version: int

    class Config:
        from_attributes = True


class BudgetTracking(BaseModel):
    """Une ligne de suivi par budget: montant prévu, dépensé et pourcentage utilisé"""
    category: str
    budget: str
    spent: str
    percentage_used: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True
