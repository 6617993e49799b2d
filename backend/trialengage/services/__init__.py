"""Services — multi-step operations that span several tables.

Invariants:
    - Services take an AsyncSession and leave commit to the caller unless noted
    - Domain rules come from core/; services only orchestrate IO around them
"""
