"""Vicsek flocking on a periodic domain."""
