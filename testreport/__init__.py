"""Reconstruct structured test and benchmark reports from event streams."""
