"""
Service des actifs et passifs mensuels; chaque modification recalcule le patrimoine net du mois
"""
import logging

from sqlalchemy.orm import Session

from database import crud
from database.models import AssetModel, LiabilityModel
from models.holding import HoldingCreate
from services.exceptions import RecordNotFoundError
from services.net_worth_service import NetWorthService
from services.period import month_range

logger = logging.getLogger(__name__)


class HoldingService:
    """
    Même logique pour les actifs et les passifs; seules les fonctions de stockage changent.
    """

    def __init__(self, entity: str, save_fn, find_fn, model, net_worth_service: NetWorthService):
        self.entity = entity
        self._save = save_fn
        self._find = find_fn
        self._model = model
        self.net_worth_service = net_worth_service

    def get_by_month(self, db: Session, year: int, month: int):
        month_range(year, month)
        logger.info(f"Lecture des {self.entity} pour {year}-{month:02d}")
        return self._find(db, year, month)

    def save(self, db: Session, holding: HoldingCreate):
        previous = None
        if holding.id is not None:
            previous = crud.get_holding_by_id(db, self._model, holding.id)
            if previous:
                previous = (previous.year, previous.month)

        saved = self._save(db, holding)
        if saved is None:
            raise RecordNotFoundError(self.entity, holding.id)
        logger.info(f"{self.entity} enregistré avec l'ID {saved.id}")

        self.net_worth_service.sync_from_holdings(db, saved.year, saved.month)
        # La ligne a changé de mois: l'ancien mois doit aussi être recalculé
        if previous and previous != (saved.year, saved.month):
            self.net_worth_service.sync_from_holdings(db, *previous)
        return saved

    def delete(self, db: Session, holding_id: int):
        holding = crud.get_holding_by_id(db, self._model, holding_id)
        if not holding:
            raise RecordNotFoundError(self.entity, holding_id)
        year, month = holding.year, holding.month

        crud.delete_holding(db, self._model, holding_id)
        logger.info(f"{self.entity} {holding_id} supprimé")
        self.net_worth_service.sync_from_holdings(db, year, month)


def asset_service(net_worth_service: NetWorthService) -> HoldingService:
    return HoldingService(
        "Asset", crud.save_asset, crud.find_assets_by_year_and_month, AssetModel, net_worth_service
    )


def liability_service(net_worth_service: NetWorthService) -> HoldingService:
    return HoldingService(
        "Liability", crud.save_liability, crud.find_liabilities_by_year_and_month,
        LiabilityModel, net_worth_service
    )
