"""Hostel management package.

Organized by feature modules (allottees, rooms, attendance, complaints)
with a thin Flask controller layer on top of service/repository layers.
"""
