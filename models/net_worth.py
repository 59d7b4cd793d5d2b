from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

from models.money import Money, NonNegativeAmount


class NetWorthCreate(BaseModel):
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    assets: NonNegativeAmount
    liabilities: NonNegativeAmount

class NetWorth(BaseModel):
    id: int
    year: int
    month: int
    assets: Money
    liabilities: Money

    @computed_field(alias="netWorth")
    @property
    def net_worth(self) -> Money:
        return self.assets - self.liabilities

    class Config:
        from_attributes = True


class NetWorthStats(BaseModel):
    """Statistiques dérivées de l'historique (du plus ancien au plus récent)"""
    count: int
    current: Money = Decimal("0")
    change_1m: Money = Field(default=Decimal("0"), alias="change1m")
    change_3m: Money = Field(default=Decimal("0"), alias="change3m")
    average_monthly_change: Money = Decimal("0")
    highest: Money = Decimal("0")
    lowest: Money = Decimal("0")
    first: Optional[NetWorth] = None
    last: Optional[NetWorth] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
