"""Core signal engine: models, indicators, and the scoring pipeline.

This package contains pure business logic with no I/O dependencies
(no network, storage, or UI). Market data is supplied by the caller
(see app/ for the Binance-backed provider).
"""
