"""
Holderscope — token holder, trader and activity lookups over the Solscan API.

Pages through Solscan holder and transfer feeds, folds the records into
per-wallet aggregates, and serves the results over a small FastAPI app
and a CSV export tool.
"""

__version__ = "0.1.0"
