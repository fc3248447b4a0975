"""Attendance Tracker package.

Feature modules (tokens, attendance, reports, users) with a thin Flask
controller layer on top of service/repository layers. Attendance is marked by
scanning short-lived, single-use tokens: the first scan of a day checks the
user in, the second checks them out.
"""
