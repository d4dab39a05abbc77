"""Store query settings shared by the shipment repositories."""

import os

# Every list query is capped; the console pages nothing and re-queries instead.
QUERY_LIMIT = int(os.environ.get("SHIPMENT_QUERY_LIMIT", "500"))
