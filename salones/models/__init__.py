from salones.models.usuario import Usuario
from salones.models.salon import Salon
from salones.models.turno import Turno
from salones.models.servicio import Servicio
from salones.models.reserva import Reserva, ReservaServicio

# This makes the models directory a Python package and ensures all models are loaded
