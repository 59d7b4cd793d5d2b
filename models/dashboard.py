from typing import List

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from models.money import Money


class BudgetOverview(BaseModel):
    category: str
    budgeted: Money
    spent: Money
    remaining: Money
    percentage_used: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class DashboardSummary(BaseModel):
    year: int
    month: int
    total_income: Money
    total_expenses: Money
    net_balance: Money
    budget_overview: List[BudgetOverview]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
