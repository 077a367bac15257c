"""
Web Server Gateway Interface (WSGI) entry point
"""
from service import create_app

app = create_app()
