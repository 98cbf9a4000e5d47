"""
Household Reconciler - Source Package

The reconciliation and cost-splitting core of a household budgeting app.

DESIGN PRINCIPLES:
1. The engine proposes, the household decides
2. Pure functions over in-memory records
3. No silent corrections
4. Every flow is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Household Reconciler Team"
