"""Adapters connecting the reconciler to catalogs and event sources."""
