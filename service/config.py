"""
Global Configuration for Application
"""
import os
import logging

# Get configuration from environment
DATABASE_URI = os.getenv("DATABASE_URI", "sqlite:///:memory:")

# Configure SQLAlchemy
SQLALCHEMY_DATABASE_URI = DATABASE_URI
SQLALCHEMY_TRACK_MODIFICATIONS = False
# SQLALCHEMY_POOL_SIZE = 2

# Secret for session management
SECRET_KEY = os.getenv("SECRET_KEY", "sup3r-s3cr3t")
LOGGING_LEVEL = logging.INFO

# Keep 404 messages exactly as raised by the service
RESTX_ERROR_404_HELP = False

# Cached cart responses live for five minutes unless invalidated first
CART_CACHE_TTL = int(os.getenv("CART_CACHE_TTL", "300"))

# Rate limits are "<limit>/<interval in seconds>" per client address
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() in ("true", "1", "yes")
RATE_LIMIT_GLOBAL = os.getenv("RATE_LIMIT_GLOBAL", "100/60")
RATE_LIMIT_READ = os.getenv("RATE_LIMIT_READ", "60/60")
RATE_LIMIT_WRITE = os.getenv("RATE_LIMIT_WRITE", "30/60")
RATE_LIMIT_CART_MODIFY = os.getenv("RATE_LIMIT_CART_MODIFY", "20/60")
