"""
SeedSight Integrations - Upstream service clients.

This module contains:
- mcsr: MCSR Ranked API client (httpx)
"""

__all__: list[str] = []
