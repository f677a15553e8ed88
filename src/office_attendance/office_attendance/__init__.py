"""Office Attendance package.

Attendance lifecycle and timekeeping engine: a Flask gateway that owns the
per-day attendance records, plus a client library (day-session state machine,
duration ticker) that a UI process embeds.
"""
