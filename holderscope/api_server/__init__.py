"""
API server — FastAPI routes for holder, trader and interval lookups.
"""
