"""Attendance Engine package.

This package is organized by feature modules (shifts, calendar, attendance)
with a thin Flask controller layer over the service/repository layers.
The classification rules live in ``attendance.classifier`` and never touch I/O.
"""
