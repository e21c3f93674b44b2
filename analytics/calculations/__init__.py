"""
Pure calculation functions for the portfolio analytics engine.
Every public function is guarded and returns a documented fallback instead of raising.
"""
