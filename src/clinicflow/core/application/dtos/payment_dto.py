from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class PaymentDTO(BaseModel):
    user_id: str
    amount: Decimal = Field(gt=0)
    due_date: date
