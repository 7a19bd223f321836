"""Campground stay pricing and quote engine.

Shared package used by the REST API and booking tooling:
- models: pydantic models for configuration, requests and quotes
- services: rate resolution, pricing rules, discounts, taxes, deposits
- utils: structured logging helpers
"""

__version__ = "0.1.0"
