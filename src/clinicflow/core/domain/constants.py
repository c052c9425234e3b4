from typing import Literal

Role = Literal["ADMIN", "PROFESSIONAL"]
LoanStatus = Literal["ACTIVE", "RETURNED"]
PaymentStatus = Literal["PENDING", "PAID"]
RegistrationStatus = Literal["CONFIRMED", "REJECTED"]
EventModality = Literal["PRESENTIAL", "ONLINE"]
TransactionType = Literal["INCOME", "EXPENSE"]
NotificationKind = Literal["documents", "payments"]

DayOfWeek = Literal[
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
]
Shift = Literal[
    "Manhã (08h-12h)",
    "Tarde (13h-17h)",
    "Noite (18h-22h)",
]

DAYS_OF_WEEK: tuple[str, ...] = DayOfWeek.__args__
SHIFTS: tuple[str, ...] = Shift.__args__

# Categoria sentinela para transações órfãs
PENDING_CATEGORY = "Pendente"

# Fallback exibido quando a tabela de categorias está vazia (nunca gravado)
DEFAULT_INCOME_CATEGORIES = (
    "Consultas",
    "Procedimentos",
    "Aluguel de Sala",
    "Venda de Produtos",
    "Outros",
)
DEFAULT_EXPENSE_CATEGORIES = (
    "Aluguel do Imóvel",
    "Energia Elétrica",
    "Água e Esgoto",
    "Internet/Telefone",
    "Limpeza",
    "Manutenção Predial",
    "Salários/Colaboradores",
    "Impostos",
    "Marketing",
    "Materiais de Escritório",
    "Outros",
)

SYSTEM_SETTINGS_ID = "default"
UNKNOWN_PROFESSIONAL = "Desconhecido"
