"""
Vercel serverless entry point for the Spopeer submission gateway.

Vercel's filesystem is read-only outside /tmp, so with STORAGE_BACKEND=database
set DATABASE_PATH=/tmp/submissions.db (data is lost on cold starts) or use
STORAGE_BACKEND=sheets with the GOOGLE_SHEETS_* variables set in the Vercel
dashboard. Multi-line private keys pasted there usually arrive with literal
"\\n" sequences; the gateway normalizes them before authenticating.
"""

import sys
import os

# Make the project root importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app

# Vercel expects a WSGI callable named `app` at module level
app = create_app()
