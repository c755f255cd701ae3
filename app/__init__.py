# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, middleware setup, router mounting
# - config.py: Environment variable loading and settings
# - exceptions.py: Exception hierarchy and the error envelopes
# - auth/: Identity gate (session token verification)
# - routers/: Health checks and the generated resource routes
#
# The app layer is thin - it handles HTTP concerns and delegates
# resource policy to the core/ package.
# =============================================================================
