"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt, work factor 10)
  • Credential verification for the login flow
  • JWT issuance & verification (HS256, 7-day expiry)
  • ``AuthGate`` composing both flows per request
  • Register / Login API routes
  • ``get_current_identity`` FastAPI dependency
"""
