"""
Suivi des budgets: dépenses regroupées par catégorie et comparées aux budgets du mois
"""
import logging
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from sqlalchemy.orm import Session

from database import crud
from models.budget import BudgetTracking
from models.category import Category
from models.dashboard import BudgetOverview, DashboardSummary
from services.period import month_range

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def spent_by_category(expenditures) -> Dict[Category, Decimal]:
    """Somme des dépenses par catégorie; une catégorie sans dépense est absente"""
    by_category = defaultdict(lambda: ZERO)
    for expenditure in expenditures:
        by_category[expenditure.category] += expenditure.amount
    return dict(by_category)


def percentage_used(spent: Decimal, budgeted: Decimal) -> Decimal:
    """spent / budgeted * 100 arrondi au centième (half-up); 0 si le budget est nul"""
    if budgeted <= 0:
        return ZERO
    return (spent * 100 / budgeted).quantize(CENT, rounding=ROUND_HALF_UP)


class BudgetTrackingService:

    def _load_month(self, db: Session, year: int, month: int):
        start, end = month_range(year, month)
        budgets = crud.find_budgets_by_date_range(db, start, end)
        expenditures = crud.find_expenditures_by_date_range(db, start, end)
        logger.info(
            f"{len(budgets)} budget(s) et {len(expenditures)} dépense(s) entre {start} et {end}"
        )
        return budgets, expenditures

    def get_budget_tracking(self, db: Session, month: int, year: int) -> List[BudgetTracking]:
        """
        Une ligne par budget du mois (et non par catégorie): deux budgets de la même
        catégorie donnent deux lignes avec le même montant dépensé.
        """
        logger.info(f"Suivi des budgets pour {year}-{month:02d}")
        budgets, expenditures = self._load_month(db, year, month)
        spent = spent_by_category(expenditures)

        tracking = []
        for budget in budgets:
            category_spent = spent.get(budget.category, ZERO)
            tracking.append(BudgetTracking(
                category=budget.category.value,
                budget=f"{budget.amount:.2f}",
                spent=f"{category_spent:.2f}",
                percentage_used=float(percentage_used(category_spent, budget.amount)),
            ))
        return tracking

    def summarize_month(self, db: Session, year: int, month: int) -> DashboardSummary:
        """Totaux du mois et vue d'ensemble des budgets pour le tableau de bord"""
        start, end = month_range(year, month)
        budgets, expenditures = self._load_month(db, year, month)
        income = crud.find_income_by_date_range(db, start, end)

        total_income = sum((i.amount for i in income), ZERO)
        total_expenses = sum((e.amount for e in expenditures), ZERO)
        spent = spent_by_category(expenditures)

        overview = []
        for budget in budgets:
            category_spent = spent.get(budget.category, ZERO)
            overview.append(BudgetOverview(
                category=budget.category.value,
                budgeted=budget.amount,
                spent=category_spent,
                remaining=budget.amount - category_spent,
                percentage_used=float(percentage_used(category_spent, budget.amount)),
            ))

        return DashboardSummary(
            year=year,
            month=month,
            total_income=total_income,
            total_expenses=total_expenses,
            net_balance=total_income - total_expenses,
            budget_overview=overview,
        )
