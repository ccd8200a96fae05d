# toolroom/calculators/__init__.py
"""Closed-form machining and payroll calculators. No I/O, no database."""
