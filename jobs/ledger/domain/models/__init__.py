from jobs.ledger.domain.models.request import ActiveRequest, CompletedRequest, Stage


__all__ = ["ActiveRequest", "CompletedRequest", "Stage"]
