# src/btcproxy/infrastructure/monitoring/metrics.py
from prometheus_client import Counter

CACHE_HITS = Counter("btcproxy_cache_hits_total", "Cache hits", ["cache"])
CACHE_MISSES = Counter("btcproxy_cache_misses_total", "Cache misses (including expired entries)", ["cache"])
UPSTREAM_REQUESTS = Counter(
    "btcproxy_upstream_requests_total", "Calls made to the upstream price API", ["endpoint", "outcome"]
)
PRUNED_ENTRIES = Counter("btcproxy_pruned_entries_total", "Historical cache entries removed by pruning")
