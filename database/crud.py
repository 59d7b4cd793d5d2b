from datetime import date
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.models import (
    IncomeModel, ExpenditureModel, BudgetModel,
    AssetModel, LiabilityModel, NetWorthModel
)
from models.budget import BudgetCreate
from models.category import Category
from models.expenditure import ExpenditureCreate
from models.holding import HoldingCreate
from models.income import IncomeCreate

# Les mises à jour passent par le flush de l'ORM: le version_id_col ajoute
# "AND version = ?" à l'UPDATE et lève StaleDataError si la ligne a changé entre-temps.

# Income CRUD functions
def create_income(db: Session, income: IncomeCreate):
    """Crée un nouveau revenu"""
    db_income = IncomeModel(
        amount=income.amount,
        description=income.description,
        date=income.date
    )
    db.add(db_income)
    db.commit()
    db.refresh(db_income)
    return db_income

def get_income_by_id(db: Session, income_id: int):
    """Récupère un revenu par son ID"""
    return db.query(IncomeModel).filter(IncomeModel.id == income_id).first()

def find_income_by_date_range(db: Session, start: date, end: date):
    """Récupère les revenus dont la date est entre start et end (inclus)"""
    return db.query(IncomeModel).filter(
        IncomeModel.date >= start,
        IncomeModel.date <= end
    ).order_by(IncomeModel.date, IncomeModel.id).all()

def update_income(db: Session, db_income: IncomeModel, income: IncomeCreate):
    """Remplace tous les champs d'un revenu"""
    db_income.amount = income.amount
    db_income.description = income.description
    db_income.date = income.date
    db.commit()
    db.refresh(db_income)
    return db_income

def delete_income(db: Session, income_id: int):
    """Supprime un revenu"""
    income = get_income_by_id(db, income_id)
    if not income:
        return False
    db.delete(income)
    db.commit()
    return True

# Expenditure CRUD functions
def create_expenditure(db: Session, expenditure: ExpenditureCreate):
    """Crée une nouvelle dépense"""
    db_expenditure = ExpenditureModel(
        amount=expenditure.amount,
        description=expenditure.description,
        category=expenditure.category,
        date=expenditure.date
    )
    db.add(db_expenditure)
    db.commit()
    db.refresh(db_expenditure)
    return db_expenditure

def get_expenditure_by_id(db: Session, expenditure_id: int):
    """Récupère une dépense par son ID"""
    return db.query(ExpenditureModel).filter(ExpenditureModel.id == expenditure_id).first()

def find_expenditures_by_date_range(db: Session, start: date, end: date):
    """Récupère les dépenses dont la date est entre start et end (inclus)"""
    return db.query(ExpenditureModel).filter(
        ExpenditureModel.date >= start,
        ExpenditureModel.date <= end
    ).order_by(ExpenditureModel.date, ExpenditureModel.id).all()

def update_expenditure(db: Session, db_expenditure: ExpenditureModel, expenditure: ExpenditureCreate):
    """Remplace tous les champs d'une dépense"""
    db_expenditure.amount = expenditure.amount
    db_expenditure.description = expenditure.description
    db_expenditure.category = expenditure.category
    db_expenditure.date = expenditure.date
    db.commit()
    db.refresh(db_expenditure)
    return db_expenditure

def delete_expenditure(db: Session, expenditure_id: int):
    """Supprime une dépense"""
    expenditure = get_expenditure_by_id(db, expenditure_id)
    if not expenditure:
        return False
    db.delete(expenditure)
    db.commit()
    return True

# Budget CRUD functions
def create_budget(db: Session, budget: BudgetCreate):
    """Crée un budget (aucune vérification de doublon par catégorie/mois)"""
    db_budget = BudgetModel(
        amount=budget.amount,
        category=budget.category,
        date=budget.date
    )
    db.add(db_budget)
    db.commit()
    db.refresh(db_budget)
    return db_budget

def get_budget_by_id(db: Session, budget_id: int):
    """Récupère un budget par son ID"""
    return db.query(BudgetModel).filter(BudgetModel.id == budget_id).first()

def find_budgets_by_date_range(db: Session, start: date, end: date):
    """Récupère les budgets dont la date est entre start et end (inclus)"""
    return db.query(BudgetModel).filter(
        BudgetModel.date >= start,
        BudgetModel.date <= end
    ).order_by(BudgetModel.id).all()

def find_budget_by_category_and_date_range(db: Session, category: Category, start: date, end: date):
    """Récupère le premier budget d'une catégorie sur la période"""
    return db.query(BudgetModel).filter(
        BudgetModel.category == category,
        BudgetModel.date >= start,
        BudgetModel.date <= end
    ).order_by(BudgetModel.id).first()

def update_budget(db: Session, db_budget: BudgetModel, budget: BudgetCreate):
    """Remplace tous les champs d'un budget"""
    db_budget.amount = budget.amount
    db_budget.category = budget.category
    db_budget.date = budget.date
    db.commit()
    db.refresh(db_budget)
    return db_budget

def delete_budget(db: Session, budget_id: int):
    """Supprime un budget"""
    budget = get_budget_by_id(db, budget_id)
    if not budget:
        return False
    db.delete(budget)
    db.commit()
    return True

# Asset / Liability functions (même forme pour les deux tables)
def save_holding(db: Session, model, holding: HoldingCreate):
    """
    Crée une ligne d'actif/passif, ou remplace la ligne existante si holding.id est fourni.
    Retourne None si l'ID fourni n'existe pas.
    """
    if holding.id is not None:
        db_holding = db.query(model).filter(model.id == holding.id).first()
        if not db_holding:
            return None
    else:
        db_holding = model()
        db.add(db_holding)

    db_holding.year = holding.year
    db_holding.month = holding.month
    db_holding.amount = holding.amount
    db_holding.comment = holding.comment
    db.commit()
    db.refresh(db_holding)
    return db_holding

def find_holdings_by_year_and_month(db: Session, model, year: int, month: int):
    """Récupère les lignes d'actif/passif d'un mois"""
    return db.query(model).filter(
        model.year == year,
        model.month == month
    ).order_by(model.id).all()

def get_holding_by_id(db: Session, model, holding_id: int):
    return db.query(model).filter(model.id == holding_id).first()

def delete_holding(db: Session, model, holding_id: int):
    """Supprime une ligne d'actif/passif"""
    holding = get_holding_by_id(db, model, holding_id)
    if not holding:
        return False
    db.delete(holding)
    db.commit()
    return True

def save_asset(db: Session, asset: HoldingCreate):
    return save_holding(db, AssetModel, asset)

def find_assets_by_year_and_month(db: Session, year: int, month: int):
    return find_holdings_by_year_and_month(db, AssetModel, year, month)

def save_liability(db: Session, liability: HoldingCreate):
    return save_holding(db, LiabilityModel, liability)

def find_liabilities_by_year_and_month(db: Session, year: int, month: int):
    return find_holdings_by_year_and_month(db, LiabilityModel, year, month)

# Net worth functions
def find_net_worth_by_year_and_month(db: Session, year: int, month: int):
    """Récupère le patrimoine net d'un mois (au plus une ligne)"""
    return db.query(NetWorthModel).filter(
        NetWorthModel.year == year,
        NetWorthModel.month == month
    ).first()

def upsert_net_worth(db: Session, year: int, month: int, assets: Decimal, liabilities: Decimal):
    """
    Crée ou met à jour le patrimoine net d'un mois.
    Si un autre écrivain insère la même clé (year, month) entre la lecture et le commit,
    la contrainte d'unicité rejette l'insertion et on met à jour sa ligne à la place.
    """
    net_worth = find_net_worth_by_year_and_month(db, year, month)
    if net_worth is None:
        net_worth = NetWorthModel(year=year, month=month)
        db.add(net_worth)
    net_worth.assets = assets
    net_worth.liabilities = liabilities

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        net_worth = find_net_worth_by_year_and_month(db, year, month)
        if net_worth is None:
            raise
        net_worth.assets = assets
        net_worth.liabilities = liabilities
        db.commit()

    db.refresh(net_worth)
    return net_worth

def find_all_net_worth_ordered(db: Session):
    """Récupère tout l'historique, trié par année puis mois"""
    return db.query(NetWorthModel).order_by(
        NetWorthModel.year.asc(),
        NetWorthModel.month.asc()
    ).all()

def find_net_worth_in_box(db: Session, start_year: int, start_month: int,
                          end_year: int, end_month: int):
    """
    Récupère l'historique dont l'année est dans [start_year, end_year]
    ET le mois dans [start_month, end_month] (filtre rectangulaire, pas chronologique).
    """
    return db.query(NetWorthModel).filter(
        NetWorthModel.year >= start_year,
        NetWorthModel.year <= end_year,
        NetWorthModel.month >= start_month,
        NetWorthModel.month <= end_month
    ).order_by(
        NetWorthModel.year.asc(),
        NetWorthModel.month.asc()
    ).all()
