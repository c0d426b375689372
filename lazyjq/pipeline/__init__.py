"""Reactive query/search pipeline.

Debounced evaluation, chunked suggestion loading, spinner bookkeeping and the
single state aggregator that publishes render snapshots.
"""
