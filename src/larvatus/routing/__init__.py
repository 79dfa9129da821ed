"""Routing — per-method route tables with ``:name`` path parameters.

Templates are compiled once at registration time; matching walks each
method's routes in registration order and the first match wins.
"""
