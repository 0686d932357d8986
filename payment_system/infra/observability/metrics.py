from prometheus_client import Counter


payout_volume_total = Counter("payout_volume_total", "Total payout volume transferred (cents)", ["currency", "status"])

payout_failures_total = Counter("payout_failures_total", "Failed payout attempts", ["kind"])

payout_deduplicated_total = Counter(
    "payout_deduplicated_total", "Payout calls answered from an existing transfer record", ["source"]
)
