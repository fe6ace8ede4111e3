"""
Payroll Kernel

Shared foundation for the attendance-to-pay engine:
- Structured JSON logging
- Typed, coded exceptions
- Immutable domain models and policy constants
- Decimal-only money
"""

__version__ = "0.1.0"
