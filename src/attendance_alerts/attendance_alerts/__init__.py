"""Attendance Alerts package.

Feature modules (attendance, students, alerts, notifications) with a thin
Flask JSON controller layer on top of service/repository layers.
"""
