"""
SeedSight Analysis - Pure transformations over match records.

This module contains:
- variations: Seed variation tag decoding
- outcome: Outcome classification and viewpoint resolution
- filters: Multi-dimension match filtering
- timeline: Run phase segmentation
- aggregate: Overview counts, breakdowns and series
"""

__all__: list[str] = []
