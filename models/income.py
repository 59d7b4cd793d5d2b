import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, StringConstraints

from models.money import Money, PositiveAmount

Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class IncomeCreate(BaseModel):
    amount: PositiveAmount
    description: Description
    date: datetime.date

class IncomeUpdate(IncomeCreate):
    # Version lue par le client; si elle est périmée la mise à jour est refusée (409)
    version: Optional[int] = None

class Income(BaseModel):
    id: int
    amount: Money
    description: str
    date: datetime.date
    version: int

    class Config:
        from_attributes = True


class Total(BaseModel):
    total: Money
