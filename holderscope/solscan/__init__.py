"""
Solscan API access — Pro and public clients plus the record models they return.
"""

from holderscope.solscan.client import (  # noqa: F401
    BaseSolscanClient,
    SolscanClient,
    SolscanPublicClient,
    build_client,
)
from holderscope.solscan.models import Page, RawHolder, RawTransfer  # noqa: F401

__all__ = [
    "BaseSolscanClient",
    "Page",
    "RawHolder",
    "RawTransfer",
    "SolscanClient",
    "SolscanPublicClient",
    "build_client",
]
