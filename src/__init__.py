"""
Contractor Ledger - Source Package

A local record-keeping tool for independent contractors tracking
construction projects, expenses, bills and payments.

DESIGN PRINCIPLES:
1. One store owns the records, and only its commands change them
2. Cross-record rules (spent totals, cascades) hold after every command
3. The store does no I/O; saving happens after each change, outside it
4. Storage and login are swappable interfaces
"""

__version__ = "1.0.0"
__author__ = "Contractor Ledger Team"
