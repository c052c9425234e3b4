from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from clinicflow.core.domain.constants import TransactionType


class FinancialTransactionDTO(BaseModel):
    description: str
    amount: Decimal = Field(gt=0)
    type: TransactionType
    category: str = ""
    date: date


class FinancialCategoryDTO(BaseModel):
    name: str = Field(min_length=1)
    type: TransactionType
