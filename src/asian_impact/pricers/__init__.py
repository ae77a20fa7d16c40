"""Pricing engines built on the models."""
