from fastapi import FastAPI, HTTPException, Query, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import uvicorn
from datetime import datetime
import logging

from config import settings
from database.database import init_db, get_db
from models.budget import Budget, BudgetCreate, BudgetUpdate, BudgetTracking
from models.category import Category
from models.dashboard import DashboardSummary
from models.expenditure import Expenditure, ExpenditureCreate, ExpenditureUpdate
from models.holding import Asset, AssetCreate, Liability, LiabilityCreate
from models.income import Income, IncomeCreate, IncomeUpdate, Total
from models.net_worth import NetWorth, NetWorthCreate, NetWorthStats
from services.budget_tracking_service import BudgetTrackingService
from services.exceptions import (
    RecordNotFoundError, ConcurrentModificationError, InvalidPeriodError
)
from services.holding_service import asset_service, liability_service
from services.ledger_service import LedgerService
from services.net_worth_service import NetWorthService

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Finance Tracker API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize database
init_db()

# Initialize services
ledger_service = LedgerService()
budget_tracking_service = BudgetTrackingService()
net_worth_service = NetWorthService()
assets_service = asset_service(net_worth_service)
liabilities_service = liability_service(net_worth_service)


def error_response(status_code: int, message: str, errors: Optional[dict] = None):
    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_code,
            "message": message,
            "errors": errors,
            "timestamp": datetime.now().isoformat(),
        },
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        # ("body", "amount") -> "amount"; ("query", "year") -> "year"
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "request"] = error.get("msg", "invalide")
    return error_response(400, "Validation échouée", errors)

@app.exception_handler(InvalidPeriodError)
async def invalid_period_handler(request: Request, exc: InvalidPeriodError):
    return error_response(400, str(exc))

@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return error_response(404, str(exc))

@app.exception_handler(ConcurrentModificationError)
async def concurrent_modification_handler(request: Request, exc: ConcurrentModificationError):
    return error_response(409, str(exc))

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Erreur inattendue sur {request.method} {request.url.path}")
    return error_response(500, "Une erreur inattendue est survenue")


@app.get("/")
async def root():
    return {"message": "Finance Tracker API"}

@app.get("/api/categories", response_model=List[str])
def get_categories():
    """
    Liste des catégories disponibles pour les dépenses et les budgets
    """
    return [c.value for c in Category]

# Income endpoints
@app.post("/api/income", response_model=Income)
def create_income_endpoint(income: IncomeCreate, db: Session = Depends(get_db)):
    """
    Crée un revenu
    """
    return ledger_service.create_income(db, income)

@app.get("/api/income", response_model=List[Income])
def get_income_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Récupère les revenus d'un mois (mois 1-12)
    """
    return ledger_service.get_income_by_month(db, year, month)

@app.get("/api/income/total", response_model=Total)
def get_total_income_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Calcule le total des revenus d'un mois
    """
    return Total(total=ledger_service.get_total_income(db, year, month))

@app.put("/api/income/{income_id}", response_model=Income)
def update_income_endpoint(income_id: int, income: IncomeUpdate, db: Session = Depends(get_db)):
    """
    Remplace un revenu existant; 409 si la version envoyée est périmée
    """
    return ledger_service.update_income(db, income_id, income, income.version)

@app.delete("/api/income/{income_id}")
def delete_income_endpoint(income_id: int, db: Session = Depends(get_db)):
    ledger_service.delete_income(db, income_id)
    return {"success": True, "message": "Revenu supprimé avec succès"}

# Expenditure endpoints
@app.post("/api/expenditure", response_model=Expenditure)
def create_expenditure_endpoint(expenditure: ExpenditureCreate, db: Session = Depends(get_db)):
    """
    Crée une dépense
    """
    return ledger_service.create_expenditure(db, expenditure)

@app.get("/api/expenditure", response_model=List[Expenditure])
def get_expenditures_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Récupère les dépenses d'un mois (mois 1-12)
    """
    return ledger_service.get_expenditures_by_month(db, year, month)

@app.get("/api/expenditure/total", response_model=Total)
def get_total_expenditure_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    return Total(total=ledger_service.get_total_expenditure(db, year, month))

@app.put("/api/expenditure/{expenditure_id}", response_model=Expenditure)
def update_expenditure_endpoint(
    expenditure_id: int,
    expenditure: ExpenditureUpdate,
    db: Session = Depends(get_db)
):
    return ledger_service.update_expenditure(db, expenditure_id, expenditure, expenditure.version)

@app.delete("/api/expenditure/{expenditure_id}")
def delete_expenditure_endpoint(expenditure_id: int, db: Session = Depends(get_db)):
    ledger_service.delete_expenditure(db, expenditure_id)
    return {"success": True, "message": "Dépense supprimée avec succès"}

# Budget endpoints
@app.post("/api/budget", response_model=Budget)
def create_budget_endpoint(budget: BudgetCreate, db: Session = Depends(get_db)):
    """
    Crée un budget pour une catégorie
    """
    logger.info(f"Création du budget {budget.category.value} au {budget.date}")
    return ledger_service.create_budget(db, budget)

@app.get("/api/budget", response_model=List[Budget])
def get_budgets_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Récupère les budgets d'un mois
    """
    return ledger_service.get_budgets_by_month(db, year, month)

@app.get("/api/budget/category", response_model=Budget)
def get_budget_for_category_endpoint(
    category: Category = Query(..., description="Catégorie du budget"),
    year: int = Query(...),
    month: int = Query(...),
    db: Session = Depends(get_db)
):
    """
    Récupère le budget d'une catégorie pour un mois, 404 s'il n'existe pas
    """
    budget = ledger_service.get_budget_for_category(db, category, year, month)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget non trouvé")
    return budget

@app.put("/api/budget/{budget_id}", response_model=Budget)
def update_budget_endpoint(budget_id: int, budget: BudgetUpdate, db: Session = Depends(get_db)):
    """
    Met à jour un budget; 409 si un autre utilisateur l'a modifié entre-temps
    """
    return ledger_service.update_budget(db, budget_id, budget, budget.version)

@app.delete("/api/budget/{budget_id}")
def delete_budget_endpoint(budget_id: int, db: Session = Depends(get_db)):
    ledger_service.delete_budget(db, budget_id)
    return {"success": True, "message": "Budget supprimé avec succès"}

@app.get("/api/budget-tracking", response_model=List[BudgetTracking])
def get_budget_tracking_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Compare les dépenses du mois aux budgets: une ligne par budget
    """
    return budget_tracking_service.get_budget_tracking(db, month, year)

@app.get("/api/dashboard", response_model=DashboardSummary)
def get_dashboard_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Totaux du mois (revenus, dépenses, solde) et vue d'ensemble des budgets
    """
    return budget_tracking_service.summarize_month(db, year, month)

# Asset / Liability endpoints
@app.get("/api/assets", response_model=List[Asset])
def get_assets_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    return assets_service.get_by_month(db, year, month)

@app.post("/api/assets", response_model=Asset)
def save_asset_endpoint(asset: AssetCreate, db: Session = Depends(get_db)):
    """
    Crée (ou remplace si l'id est fourni) une ligne d'actif et recalcule le patrimoine net
    """
    return assets_service.save(db, asset)

@app.delete("/api/assets/{asset_id}")
def delete_asset_endpoint(asset_id: int, db: Session = Depends(get_db)):
    assets_service.delete(db, asset_id)
    return {"success": True, "message": "Actif supprimé avec succès"}

@app.get("/api/liabilities", response_model=List[Liability])
def get_liabilities_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    return liabilities_service.get_by_month(db, year, month)

@app.post("/api/liabilities", response_model=Liability)
def save_liability_endpoint(liability: LiabilityCreate, db: Session = Depends(get_db)):
    """
    Crée (ou remplace si l'id est fourni) une ligne de passif et recalcule le patrimoine net
    """
    return liabilities_service.save(db, liability)

@app.delete("/api/liabilities/{liability_id}")
def delete_liability_endpoint(liability_id: int, db: Session = Depends(get_db)):
    liabilities_service.delete(db, liability_id)
    return {"success": True, "message": "Passif supprimé avec succès"}

# Net worth endpoints
@app.get("/api/networth", response_model=Optional[NetWorth])
def get_net_worth_endpoint(year: int, month: int, db: Session = Depends(get_db)):
    """
    Patrimoine net d'un mois, ou null si aucune donnée
    """
    return net_worth_service.get_net_worth(db, year, month)

@app.post("/api/networth", response_model=NetWorth)
def save_net_worth_endpoint(net_worth: NetWorthCreate, db: Session = Depends(get_db)):
    """
    Crée ou met à jour le patrimoine net du mois (une seule ligne par année/mois)
    """
    return net_worth_service.save_or_update_net_worth(
        db, net_worth.year, net_worth.month, net_worth.assets, net_worth.liabilities
    )

def _history(db: Session, start_year, start_month, end_year, end_month):
    if None not in (start_year, start_month, end_year, end_month):
        return net_worth_service.get_history_in_range(db, start_year, start_month, end_year, end_month)
    return net_worth_service.get_history(db)

@app.get("/api/networth/history", response_model=List[NetWorth])
def get_net_worth_history_endpoint(
    startYear: Optional[int] = None,
    startMonth: Optional[int] = None,
    endYear: Optional[int] = None,
    endMonth: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """
    Historique complet, ou filtré quand les quatre bornes sont fournies
    """
    logger.info(
        f"Historique du patrimoine net: startYear={startYear}, startMonth={startMonth}, "
        f"endYear={endYear}, endMonth={endMonth}"
    )
    return _history(db, startYear, startMonth, endYear, endMonth)

@app.get("/api/networth/stats", response_model=NetWorthStats)
def get_net_worth_stats_endpoint(
    startYear: Optional[int] = None,
    startMonth: Optional[int] = None,
    endYear: Optional[int] = None,
    endMonth: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """
    Variation sur 1 et 3 mois, variation mensuelle moyenne, plus haut et plus bas
    """
    history = _history(db, startYear, startMonth, endYear, endMonth)
    return NetWorthService.history_stats(history)

if __name__ == "__main__":
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
