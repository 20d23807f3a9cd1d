"""
Padel App - Core Package

This package contains the core modules for:
- Ranking points computation (padel_app.ranking)
- Match results ingestion (padel_app.ingestion)
- Account workflows and validation (padel_app.accounts)
- Hosted auth/database client (padel_app.services)
- Shared configuration and utilities
"""

__version__ = "1.0.0"
