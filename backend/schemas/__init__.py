"""
schemas/
--------
Request models (pydantic) and pipeline records (dataclasses).
"""
