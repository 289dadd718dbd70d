#!/usr/bin/env python3
"""
WSGI entry point for the Booking Consistency Audit API.

Gunicorn serves `application`; audit runs only read, so the app can point at
a read replica.

    gunicorn --bind 127.0.0.1:5001 --workers 2 wsgi:application

Local development: `cd src && python -m api.app`
"""

import os
import sys

from dotenv import load_dotenv

BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
SRC_DIR = os.path.join(BACKEND_DIR, 'src')

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

# .env must be loaded before utils.config reads the environment
load_dotenv(os.path.join(BACKEND_DIR, '.env'))

from api.app import create_app  # noqa: E402

application = create_app()

if __name__ == "__main__":
    application.run(host='127.0.0.1', port=5001, debug=False)
