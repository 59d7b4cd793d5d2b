from typing import Optional

from pydantic import BaseModel, Field

from models.money import Money, PositiveAmount


class HoldingCreate(BaseModel):
    """Ligne d'actif ou de passif pour un mois; plusieurs lignes par mois sont permises"""
    id: Optional[int] = None  # si fourni, remplace la ligne existante
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    amount: PositiveAmount
    comment: Optional[str] = None

class Holding(BaseModel):
    id: int
    year: int
    month: int
    amount: Money
    comment: Optional[str] = None

    class Config:
        from_attributes = True


class AssetCreate(HoldingCreate):
    pass

class Asset(Holding):
    pass

class LiabilityCreate(HoldingCreate):
    pass

class Liability(Holding):
    pass
