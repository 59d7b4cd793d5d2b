"""
Service pour les revenus, dépenses et budgets: lecture par mois, totaux,
mises à jour avec verrou optimiste et suppression
"""
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from database import crud
from models.budget import BudgetCreate
from models.category import Category
from models.expenditure import ExpenditureCreate
from models.income import IncomeCreate
from services.exceptions import ConcurrentModificationError, RecordNotFoundError
from services.period import month_range

logger = logging.getLogger(__name__)


def _check_version(record, expected_version: Optional[int], entity: str):
    """Refuse la mise à jour si le client a lu une version périmée"""
    if expected_version is not None and record.version != expected_version:
        logger.warning(
            f"{entity} {record.id}: version {expected_version} périmée (actuelle: {record.version})"
        )
        raise ConcurrentModificationError(entity)


def _apply_update(db: Session, update_fn, record, data, entity: str):
    try:
        return update_fn(db, record, data)
    except StaleDataError:
        db.rollback()
        logger.warning(f"{entity} {record.id} modifié pendant la mise à jour")
        raise ConcurrentModificationError(entity)


class LedgerService:
    """Opérations sur les revenus, dépenses et budgets"""

    # Income
    def create_income(self, db: Session, income: IncomeCreate):
        return crud.create_income(db, income)

    def get_income_by_month(self, db: Session, year: int, month: int):
        start, end = month_range(year, month)
        return crud.find_income_by_date_range(db, start, end)

    def get_total_income(self, db: Session, year: int, month: int) -> Decimal:
        return sum((i.amount for i in self.get_income_by_month(db, year, month)), Decimal("0"))

    def update_income(self, db: Session, income_id: int, income: IncomeCreate,
                      expected_version: Optional[int] = None):
        existing = crud.get_income_by_id(db, income_id)
        if not existing:
            raise RecordNotFoundError("Income", income_id)
        _check_version(existing, expected_version, "Income")
        return _apply_update(db, crud.update_income, existing, income, "Income")

    def delete_income(self, db: Session, income_id: int):
        if not crud.delete_income(db, income_id):
            raise RecordNotFoundError("Income", income_id)

    # Expenditure
    def create_expenditure(self, db: Session, expenditure: ExpenditureCreate):
        return crud.create_expenditure(db, expenditure)

    def get_expenditures_by_month(self, db: Session, year: int, month: int):
        start, end = month_range(year, month)
        return crud.find_expenditures_by_date_range(db, start, end)

    def get_total_expenditure(self, db: Session, year: int, month: int) -> Decimal:
        return sum((e.amount for e in self.get_expenditures_by_month(db, year, month)), Decimal("0"))

    def update_expenditure(self, db: Session, expenditure_id: int, expenditure: ExpenditureCreate,
                           expected_version: Optional[int] = None):
        existing = crud.get_expenditure_by_id(db, expenditure_id)
        if not existing:
            raise RecordNotFoundError("Expenditure", expenditure_id)
        _check_version(existing, expected_version, "Expenditure")
        return _apply_update(db, crud.update_expenditure, existing, expenditure, "Expenditure")

    def delete_expenditure(self, db: Session, expenditure_id: int):
        if not crud.delete_expenditure(db, expenditure_id):
            raise RecordNotFoundError("Expenditure", expenditure_id)

    # Budget
    def create_budget(self, db: Session, budget: BudgetCreate):
        return crud.create_budget(db, budget)

    def get_budgets_by_month(self, db: Session, year: int, month: int):
        start, end = month_range(year, month)
        return crud.find_budgets_by_date_range(db, start, end)

    def get_budget_for_category(self, db: Session, category: Category, year: int, month: int):
        start, end = month_range(year, month)
        return crud.find_budget_by_category_and_date_range(db, category, start, end)

    def update_budget(self, db: Session, budget_id: int, budget: BudgetCreate,
                      expected_version: Optional[int] = None):
        existing = crud.get_budget_by_id(db, budget_id)
        if not existing:
            raise RecordNotFoundError("Budget", budget_id)
        _check_version(existing, expected_version, "Budget")
        return _apply_update(db, crud.update_budget, existing, budget, "Budget")

    def delete_budget(self, db: Session, budget_id: int):
        if not crud.delete_budget(db, budget_id):
            raise RecordNotFoundError("Budget", budget_id)
