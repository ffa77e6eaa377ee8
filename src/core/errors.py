"""
Errores de dominio.

Los servicios levantan estas excepciones; el middleware de la API las
convierte al envelope JSON {success: false, message}.
"""


class DomainError(Exception):
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    default_message = "Invalid request data"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class ConflictError(DomainError):
    default_message = "Conflict"


class BatchFinishedError(ConflictError):
    default_message = "Batch is already finished"


class DuplicateEntryError(ConflictError):
    default_message = "Entry already exists"


class InsufficientStockError(DomainError):
    default_message = "Insufficient stock"


class PreconditionFailedError(DomainError):
    default_message = "Preconditions not met"


class NoSalesRecordedError(DomainError):
    default_message = "No sales recorded for this branch and date"
