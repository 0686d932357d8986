from prometheus_client import Counter


charges_total = Counter("request_charges_total", "Submission charges by outcome", ["currency", "status"])

charge_volume_total = Counter("request_charge_volume_total", "Captured charge volume (cents)", ["currency"])

request_transitions_total = Counter("request_transitions_total", "Request stage transitions", ["transition", "outcome"])

reconciliation_escalations_total = Counter(
    "request_reconciliation_escalations_total", "Money movements that need operator reconciliation", ["reason"]
)

recovered_migrations_total = Counter("request_recovered_migrations_total", "Completions finished by the recovery sweep")
