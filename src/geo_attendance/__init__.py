"""Geo Attendance client package.

This package is organized by feature modules (location, attendance, users, ...)
with thin screen controllers on top of async service/repository layers.
The remote attendance server owns all business rules; this client only
acquires location, calls the REST endpoints and keeps screen state in sync.
"""
