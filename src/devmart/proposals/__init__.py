"""Proposal template management."""
