"""Footy: football news subscriptions and LLM-backed news summaries."""
