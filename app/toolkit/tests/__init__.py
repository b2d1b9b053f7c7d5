"""
Tests for the toolkit app.

- test_email.py: EmailService template and raw sending
"""
