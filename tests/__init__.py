"""
Shared test data for the Portfolio Analytics Engine.

fixtures/ holds a small holdings file (JSON and CSV) and a market snapshot
in CoinGecko /coins/markets shape, used by the aggregator, job and CLI tests.
"""
