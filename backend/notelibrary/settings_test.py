import os

os.environ.setdefault("DEBUG", "1")
os.environ.setdefault("SECRET_KEY", "notelibrary-test-secret-key-0123456789abcdef")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from .settings import *  # noqa: E402,F401,F403

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}
PAYMENT_PROOF_UPLOAD_URL = "https://uploads.test/uploadpay.php"
PAYMENT_PROOF_UPLOAD_TIMEOUT_SECONDS = 20
SERIES_PRICES = {"IOE": 100, "CEE": 100, "LIVE": 50}
SECURE_SSL_REDIRECT = False
