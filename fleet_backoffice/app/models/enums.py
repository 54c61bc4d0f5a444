"""
Fleet enumerations.

Stored values keep the labels the back office has always shown, so rows
written by older clients stay readable.
"""

import enum


class VehicleStatus(str, enum.Enum):
    ACTIVE = "Ativo"
    IN_MAINTENANCE = "Em Manutenção"
    INACTIVE = "Inativo"
    IN_USE = "Em uso"
    AVAILABLE = "Disponível"


class FuelType(str, enum.Enum):
    GASOLINE = "Gasolina"
    ETHANOL = "Etanol"
    DIESEL = "Diesel"
    FLEX = "Flex"


class LicenseCategory(str, enum.Enum):
    """Driver license (CNH) categories."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    AB = "AB"
    AC = "AC"
    AD = "AD"
    AE = "AE"


class DriverStatus(str, enum.Enum):
    ACTIVE = "Ativo"
    INACTIVE = "Inativo"


class MaintenanceType(str, enum.Enum):
    PREVENTIVE = "Preventiva"
    CORRECTIVE = "Corretiva"
    PREDICTIVE = "Preditiva"


class MaintenanceStatus(str, enum.Enum):
    SCHEDULED = "Agendada"
    COMPLETED = "Concluída"
    CANCELLED = "Cancelada"


class MaintenanceDueStatus(str, enum.Enum):
    """Derived from the maintenance date, never stored."""
    OVERDUE = "Vencida"
    UPCOMING = "Próxima"
    SCHEDULED = "Agendada"
    NO_DATE = "Sem data"


class FuelEfficiencyRating(str, enum.Enum):
    EXCELLENT = "Excelente"
    GOOD = "Bom"
    LOW = "Baixo"
