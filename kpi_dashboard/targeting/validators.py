"""
Validation utilities for the targeting store.
Each check returns a list of error messages (empty if valid).
"""
from typing import Any, List, Optional

from .constants import KPI_FORMULAS, MARKET_SCOPES, TARGET_FIELDS, TERRITORY_KINDS, PLANNER_UNKNOWNS


class TargetingValidator:
    """Validator for user-entered targeting data"""
    
    def __init__(self):
        # Configuration constants
        self.YEAR_DIGITS = 4
        self.MAX_NAME_LENGTH = 200
        
        # Valid values
        self.VALID_FORMULAS = KPI_FORMULAS
        self.VALID_TARGET_FIELDS = TARGET_FIELDS
        self.VALID_MARKET_SCOPES = MARKET_SCOPES
        self.VALID_TERRITORY_KINDS = TERRITORY_KINDS
        self.VALID_UNKNOWNS = PLANNER_UNKNOWNS
    
    # ==================== Entity Validation ====================
    
    def validate_employee(self, name: str, target_acquisition_rate: Any = None) -> List[str]:
        errors = self._validate_name(name, "Employee name")
        
        if target_acquisition_rate is not None:
            if not self._is_number(target_acquisition_rate):
                errors.append("Target acquisition rate must be a number")
            elif target_acquisition_rate < 0:
                errors.append("Target acquisition rate cannot be negative")
        
        return errors
    
    def validate_product(self, name: str, price: Any) -> List[str]:
        errors = self._validate_name(name, "Product name")
        
        if not self._is_number(price):
            errors.append("Product price must be a number")
        elif price < 0:
            errors.append("Product price cannot be negative")
        
        return errors
    
    def validate_kpi_config(self, kpi_type: str, name: str, max_points: Any, formula: str) -> List[str]:
        errors = []
        
        if not kpi_type or not str(kpi_type).strip():
            errors.append("KPI type is required")
        
        errors.extend(self._validate_name(name, "KPI name"))
        
        if not self._is_number(max_points):
            errors.append("Max points must be a number")
        
        if formula not in self.VALID_FORMULAS:
            errors.append(f"Invalid formula. Must be one of: {', '.join(self.VALID_FORMULAS)}")
        
        return errors
    
    def validate_territory(self, name: str, kind: str) -> List[str]:
        errors = self._validate_name(name, "Territory name")
        
        if kind not in self.VALID_TERRITORY_KINDS:
            errors.append(f"Invalid territory kind. Must be {' or '.join(self.VALID_TERRITORY_KINDS)}")
        
        return errors
    
    # ==================== Value Validation ====================
    
    def validate_year(self, year: Any) -> List[str]:
        if not isinstance(year, int) or isinstance(year, bool) or len(str(year)) != self.YEAR_DIGITS:
            return [f"Year must be a valid {self.YEAR_DIGITS}-digit number"]
        return []
    
    def validate_target_field(self, field_name: str, value: Optional[float]) -> List[str]:
        errors = []
        
        if field_name not in self.VALID_TARGET_FIELDS:
            errors.append(f"Invalid field. Must be {' or '.join(self.VALID_TARGET_FIELDS)}")
        
        if value is not None and not self._is_number(value):
            errors.append("Value must be a number or empty")
        
        return errors
    
    def validate_market_size(self, scope: str, size: Any) -> List[str]:
        errors = []
        
        if scope not in self.VALID_MARKET_SCOPES:
            errors.append(f"Invalid market scope. Must be {' or '.join(self.VALID_MARKET_SCOPES)}")
        
        if not self._is_number(size):
            errors.append("Market size must be a number")
        
        return errors
    
    def validate_unknown_variable(self, unknown_variable: str) -> List[str]:
        if unknown_variable not in self.VALID_UNKNOWNS:
            return [f"Invalid planner variable. Must be {' or '.join(self.VALID_UNKNOWNS)}"]
        return []
    
    # ==================== Helper Methods ====================
    
    def _validate_name(self, name: str, label: str) -> List[str]:
        if not name or not str(name).strip():
            return [f"{label} is required"]
        if len(str(name)) > self.MAX_NAME_LENGTH:
            return [f"{label} must be at most {self.MAX_NAME_LENGTH} characters"]
        return []
    
    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
