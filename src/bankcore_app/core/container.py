"""Application dependency container."""

from __future__ import annotations

from dataclasses import dataclass

from bankcore_app.core.config import AppConfig, load_config
from bankcore_app.repositories.account_repository import AccountRepository
from bankcore_app.repositories.audit_repository import AuditRepository
from bankcore_app.repositories.db_pool import ThreadLocalConnection
from bankcore_app.repositories.record_store import CsvRecordStore
from bankcore_app.repositories.schema import initialize_schema
from bankcore_app.services.account_service import AccountService
from bankcore_app.services.csv_import_service import CsvImportService
from bankcore_app.services.insurance_service import InsuranceService


@dataclass
class ServiceContainer:
    """Services sharing one record store directory and one audit database."""

    config: AppConfig
    account_service: AccountService
    insurance_service: InsuranceService
    csv_import_service: CsvImportService
    audit_repo: AuditRepository
    audit_pool: ThreadLocalConnection

    def close(self) -> None:
        self.audit_pool.close()


def build_container(config: AppConfig | None = None) -> ServiceContainer:
    """Build dependencies and initialize the audit schema."""
    config = config or load_config()

    pool = ThreadLocalConnection(config.audit.path)
    initialize_schema(pool)
    audit_repo = AuditRepository(pool)

    account_repo = AccountRepository(
        CsvRecordStore(config.store.directory),
        table=config.store.accounts_table,
        default_transfer_limit=config.accounts.default_transfer_limit,
    )

    account_service = AccountService(account_repo, audit_repo)
    insurance_service = InsuranceService(audit_repo)

    return ServiceContainer(
        config=config,
        account_service=account_service,
        insurance_service=insurance_service,
        csv_import_service=CsvImportService(account_service, insurance_service),
        audit_repo=audit_repo,
        audit_pool=pool,
    )
