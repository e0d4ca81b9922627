"""
Authentication application.

Owns the custom email-based User model. Token issuance lives in the identity
service; this project only verifies JWTs (rest_framework_simplejwt) and reads
users as a directory for notification targeting.

Key components:
    - User model: Email-based user with role, soft delete and preferences
    - UserQuerySet: Directory lookups (by id, email, role)

Usage:
    from authentication.models import User, UserRole
"""
