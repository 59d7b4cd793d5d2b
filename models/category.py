from enum import Enum


class Category(str, Enum):
    """Catégories communes aux dépenses et aux budgets (clé de jointure du suivi)"""
    GROCERIES = "GROCERIES"
    UTILITIES = "UTILITIES"
    MORTGAGE = "MORTGAGE"
    ENTERTAINMENT = "ENTERTAINMENT"
    TRANSPORTATION = "TRANSPORTATION"
    INVESTMENTS = "INVESTMENTS"
    SAVINGS = "SAVINGS"
    OTHER = "OTHER"
