from jobs.ledger.domain.services.ledger_service import RequestLedgerService


__all__ = ["RequestLedgerService"]
