"""
Service du patrimoine net: lecture, upsert par (année, mois), historique
et statistiques dérivées de l'historique
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from sqlalchemy.orm import Session

from database import crud
from models.net_worth import NetWorth, NetWorthStats
from services.period import month_range

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class NetWorthService:

    def get_net_worth(self, db: Session, year: int, month: int):
        """Retourne la ligne du mois, ou None si elle n'existe pas (pas une erreur)"""
        month_range(year, month)
        logger.info(f"Lecture du patrimoine net {year}-{month:02d}")
        return crud.find_net_worth_by_year_and_month(db, year, month)

    def save_or_update_net_worth(self, db: Session, year: int, month: int,
                                 assets: Decimal, liabilities: Decimal):
        month_range(year, month)
        saved = crud.upsert_net_worth(db, year, month, assets, liabilities)
        logger.info(f"Patrimoine net {year}-{month:02d} enregistré (id={saved.id})")
        return saved

    def get_history(self, db: Session):
        return crud.find_all_net_worth_ordered(db)

    def get_history_in_range(self, db: Session, start_year: int, start_month: int,
                             end_year: int, end_month: int):
        # Filtre année et mois séparément: demander 2023-11 -> 2024-02 ne renvoie
        # que les mois compris entre 11 et 2, donc rien. Comportement conservé tel quel.
        return crud.find_net_worth_in_box(db, start_year, start_month, end_year, end_month)

    def sync_from_holdings(self, db: Session, year: int, month: int):
        """
        Recalcule le patrimoine net du mois à partir des lignes d'actif et de passif.
        Sans aucune ligne, on ne crée rien; une ligne existante est remise à zéro.
        """
        assets = crud.find_assets_by_year_and_month(db, year, month)
        liabilities = crud.find_liabilities_by_year_and_month(db, year, month)

        if not assets and not liabilities and \
                crud.find_net_worth_by_year_and_month(db, year, month) is None:
            return None

        total_assets = sum((a.amount for a in assets), Decimal("0"))
        total_liabilities = sum((l.amount for l in liabilities), Decimal("0"))
        return self.save_or_update_net_worth(db, year, month, total_assets, total_liabilities)

    @staticmethod
    def history_stats(history: List[NetWorth]) -> NetWorthStats:
        """
        Statistiques sur un historique trié du plus ancien au plus récent:
        - change_1m: dernier - avant-dernier
        - change_3m: dernier - quatrième en partant de la fin, sinon dernier - premier
        - average_monthly_change: (dernier - premier) / (n - 1)
        """
        values = [h.assets - h.liabilities for h in history]
        count = len(values)
        if count == 0:
            return NetWorthStats(count=0)

        last = values[-1]
        change_1m = last - values[-2] if count >= 2 else Decimal("0")
        if count >= 4:
            change_3m = last - values[-4]
        elif count >= 2:
            change_3m = last - values[0]
        else:
            change_3m = Decimal("0")

        if count > 1:
            average = ((last - values[0]) / (count - 1)).quantize(CENT, rounding=ROUND_HALF_UP)
        else:
            average = Decimal("0")

        return NetWorthStats(
            count=count,
            current=last,
            change_1m=change_1m,
            change_3m=change_3m,
            average_monthly_change=average,
            highest=max(values),
            lowest=min(values),
            first=NetWorth.model_validate(history[0]),
            last=NetWorth.model_validate(history[-1]),
        )
