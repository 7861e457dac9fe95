"""Bounded contexts of the engine (catalog, matching, messaging, reveal, analysis)."""
