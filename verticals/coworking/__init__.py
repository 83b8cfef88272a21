"""Coworking vertical: partner pricing-rule surface.

Wires the core pricing engine into the marketplace:
- Pydantic schemas for the persisted rule shape
- Booking quote service (guest multiplier, area starting price)
- FastAPI router for evaluate / validate / starting-price
- Dataclass configuration
"""
