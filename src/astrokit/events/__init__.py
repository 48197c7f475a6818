"""Periodic event families and the shared enumeration cursor."""
