"""
Errores de negocio de las reservas.

Todos heredan de ValueError para que el código que ya captura ValueError
los siga tratando como rechazos esperados. Cada uno lleva el código HTTP con
el que lo responde el handler registrado en main.py.
"""
from typing import List, Optional


class ReservaError(ValueError):
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class NotFoundError(ReservaError):
    status_code = 404


class ReferenceNotFoundError(ReservaError):
    """Una referencia anidada (salón, usuario, turno, servicio) no existe o está inactiva."""

    def __init__(self, reference: str, reference_id: int, message: str):
        super().__init__(message, errors=[{"field": reference, "value": reference_id}])
        self.reference = reference
        self.reference_id = reference_id


class SlotUnavailableError(ReservaError):
    pass


class InvalidStateError(ReservaError):
    pass


class AuthorizationError(ReservaError):
    status_code = 403


class ValidationFailure(ReservaError):
    pass
