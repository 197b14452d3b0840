"""Persist activity log events into a relational store and a search index."""
