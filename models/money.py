from decimal import Decimal
from typing import Annotated

from pydantic import Field, PlainSerializer

# Les montants sortent en JSON comme chaînes à deux décimales ("150.00"), jamais en float
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: f"{v:.2f}", return_type=str, when_used="json"),
]

PositiveAmount = Annotated[Money, Field(gt=0, max_digits=12, decimal_places=2)]
NonNegativeAmount = Annotated[Money, Field(ge=0, max_digits=12, decimal_places=2)]
