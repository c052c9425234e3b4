class ClinicFlowError(Exception):
    """Classe base para todas as exceções do ClinicFlow."""
    pass


# ───────────────────────────────────────────────
# (a) Rejeições de validação: nenhuma escrita ocorreu
# ───────────────────────────────────────────────
class DomainValidationError(ClinicFlowError):
    """Uma verificação local falhou antes de qualquer chamada remota."""
    pass

class NotFoundError(DomainValidationError):
    def __init__(self, collection: str, entity_id: str) -> None:
        super().__init__(f"Registro não encontrado em {collection}: {entity_id}")
        self.collection = collection
        self.entity_id = entity_id

class ScheduleConflictError(DomainValidationError):
    """Já existe alocação para a mesma sala/dia/turno."""
    def __init__(self, room_id: str, day: str, shift: str) -> None:
        super().__init__("Conflito de horário detectado.")
        self.room_id = room_id
        self.day = day
        self.shift = shift

class ItemUnavailableError(DomainValidationError):
    """Item inexistente ou sem unidades disponíveis para empréstimo."""
    pass

class InvalidTransitionError(DomainValidationError):
    """Transição de status não permitida (ex.: RETURNED → ACTIVE)."""
    pass

class RegistrationRejectedError(DomainValidationError):
    """Base para recusas de inscrição em eventos."""
    pass

class RegistrationNotRequiredError(RegistrationRejectedError):
    pass

class AlreadyRegisteredError(RegistrationRejectedError):
    pass

class RegistrationClosedError(RegistrationRejectedError):
    pass

class EventFullError(RegistrationRejectedError):
    pass

class PermissionDeniedError(DomainValidationError):
    """Sessão sem perfil, perfil inativo ou papel incompatível."""
    pass


# ───────────────────────────────────────────────
# (b) Falhas de escrita/leitura no backend hospedado
# ───────────────────────────────────────────────
class RemoteStoreError(ClinicFlowError):
    def __init__(
        self,
        message: str,
        *,
        collection: str | None = None,
        operation: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.collection = collection
        self.operation = operation
        self.status_code = status_code
        self.code = code

class UniqueViolationError(RemoteStoreError):
    """Violação de unicidade (HTTP 409 / Postgres 23505)."""
    pass


# ───────────────────────────────────────────────
# (c) Cascata parcialmente aplicada, sem rollback
# ───────────────────────────────────────────────
class PartialCascadeError(ClinicFlowError):
    def __init__(self, operation: str, completed_steps: list[str], failed_step: str) -> None:
        super().__init__(
            f"{operation}: etapa '{failed_step}' falhou após {completed_steps or 'nenhuma etapa'}"
        )
        self.operation = operation
        self.completed_steps = completed_steps
        self.failed_step = failed_step


# ───────────────────────────────────────────────
# Provedor de identidade
# ───────────────────────────────────────────────
class IdentityError(ClinicFlowError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

class AuthenticationError(IdentityError):
    """Credenciais inválidas ou sessão expirada."""
    pass
