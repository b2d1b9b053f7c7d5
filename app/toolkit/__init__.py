"""
Toolkit - shared outbound services.

Key components:
    - services/email.py: EmailService (template and raw emails over Django's mail backend)

Usage:
    from toolkit.services.email import EmailService

Note:
    This app has no models. For generic infrastructure (base models,
    exceptions, circuit breaker), see core/.
"""
