"""Entitlement-checked data access and derived analytics."""
