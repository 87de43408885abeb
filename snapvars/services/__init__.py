from .variable_service import available_variables, getvar

__all__ = ["available_variables", "getvar"]
