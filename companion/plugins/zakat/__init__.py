from .calculator import ZakatResult, calculate_zakat
