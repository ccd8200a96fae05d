# toolroom/models/__init__.py
from .user import User, UserRole, UserStatus
from .material import CustomMaterial, MaterialSetting, MaterialPriceHistory
from .machine import Machine, MachineType
from .calculation import SavedCalculation, CalculationType, CALCULATION_TYPE_LABELS
from .menu import MenuCategory, MenuCategoryModule
from .permission import AdminPanelPermission
from .currency import CurrencyRate, RateType

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "CustomMaterial",
    "MaterialSetting",
    "MaterialPriceHistory",
    "Machine",
    "MachineType",
    "SavedCalculation",
    "CalculationType",
    "CALCULATION_TYPE_LABELS",
    "MenuCategory",
    "MenuCategoryModule",
    "AdminPanelPermission",
    "CurrencyRate",
    "RateType",
]
