"""Attendance Engine package.

Tracks class attendance against a weekly schedule and projects future
outcomes. Organized by feature modules (calendar rules, schedules,
attendance, projection, target, automark) with a thin Flask controller
layer over service/repository layers.
"""
