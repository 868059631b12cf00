"""
Review Actions Module

Stateless approval workflow driven by signed links in reviewer emails:
1. Link issuance (HMAC-signed payload, one link pair per reviewer)
2. Compose page rendered from a verified link
3. Dispatch of the composed message to the applicant, with an FYI copy
   to both internal groups

API Endpoints:
- GET /review - Compose page for a signed link
- POST /api/send-review-action - Send the composed message

Security Features:
- HMAC-SHA256 signatures compared in constant time
- Every request re-verifies the link; nothing is stored server-side
- Links do not expire and can be replayed while the secret is unchanged
"""

from .router import router

__all__ = ["router"]
