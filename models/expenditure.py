import datetime
from typing import Optional

from pydantic import BaseModel

from models.category import Category
from models.income import Description
from models.money import Money, PositiveAmount


class ExpenditureCreate(BaseModel):
    amount: PositiveAmount
    description: Description
    category: Category
    date: datetime.date

class ExpenditureUpdate(ExpenditureCreate):
    version: Optional[int] = None

class Expenditure(BaseModel):
    id: int
    amount: Money
    description: str
    category: Category
    date: datetime.date
    version: int

    class Config:
        from_attributes = True
