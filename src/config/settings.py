# src/config/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

# ==================================
# 🟢 MongoDB / ⚡ Redis
# ==================================
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DATABASE = os.getenv("MONGO_DATABASE", "coursehub")
REDIS_URI = os.getenv("REDIS_URI", "redis://localhost:6379/0")

# Sessions live in Redis as token -> user id
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 60 * 60 * 24 * 7))

PORT = int(os.getenv("PORT", 8000))

# ==================================
# 📋 Listings
# ==================================
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", 25))
ADMIN_PAGE_LIMIT = int(os.getenv("ADMIN_PAGE_LIMIT", 10))

# ==================================
# ✉️ Notifications (SMTP)
# ==================================
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_FROM = os.getenv("SMTP_FROM", "noreply@coursehub.io")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@coursehub.io")

# ==================================
# 🌱 Seed del admin por defecto
# ==================================
ADMIN_FULLNAME_DEFAULT = os.getenv("ADMIN_FULLNAME_DEFAULT", "Platform Admin")
ADMIN_EMAIL_DEFAULT = os.getenv("ADMIN_EMAIL_DEFAULT", "admin@coursehub.io")
ADMIN_PHONE_DEFAULT = os.getenv("ADMIN_PHONE_DEFAULT", "15550000000")
ADMIN_PASSWORD_DEFAULT = os.getenv("ADMIN_PASSWORD_DEFAULT")
