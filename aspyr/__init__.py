"""Aspyr learner dashboard service."""
