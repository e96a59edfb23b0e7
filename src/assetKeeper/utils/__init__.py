"""Utility helpers shared across assetKeeper."""
