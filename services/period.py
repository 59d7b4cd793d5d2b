import calendar
from datetime import date
from typing import Tuple

from services.exceptions import InvalidPeriodError


def month_range(year: int, month: int) -> Tuple[date, date]:
    """
    Retourne le premier et le dernier jour (inclus) du mois donné.
    Le mois est 1-indexé (janvier = 1).
    """
    if year < 1 or year > 9999:
        raise InvalidPeriodError(f"Année invalide: {year}")
    if month < 1 or month > 12:
        raise InvalidPeriodError(f"Mois invalide: {month} (attendu entre 1 et 12)")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
