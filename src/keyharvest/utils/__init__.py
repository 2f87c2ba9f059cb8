"""Shared utilities for keyharvest."""
