"""
Submissions Module

Handles the public banner intake flow:
1. Pre-signed photo uploads to DigitalOcean Spaces
2. Contract PDF generation and storage
3. Reviewer notifications carrying signed Approve / Needs Attention links
4. Sponsor confirmation email

API Endpoints:
- POST /api/upload-image - Pre-signed photo upload URL
- POST /api/submit-banner - Submit the completed form
- POST /api/send-email - Generic transactional email
"""

from .router import router

__all__ = ["router"]
