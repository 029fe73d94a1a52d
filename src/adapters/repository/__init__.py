"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresDataRequestRepository,
    PostgresIdentityRepository,
    PostgresReportRepository,
    run_migrations,
)

__all__ = [
    "PostgresDataRequestRepository",
    "PostgresIdentityRepository",
    "PostgresReportRepository",
    "run_migrations",
]
