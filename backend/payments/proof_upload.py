import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

ALLOWED_PROOF_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif", "image/heic"}


class ProofUploadError(Exception):
    pass


def _upload_timeout():
    return getattr(settings, "PAYMENT_PROOF_UPLOAD_TIMEOUT_SECONDS", 20)


def validate_proof_file(file_obj):
    if file_obj is None:
        raise ValueError("Please upload payment proof before submitting.")
    content_type = (getattr(file_obj, "content_type", "") or "").lower()
    if content_type not in ALLOWED_PROOF_CONTENT_TYPES:
        raise ValueError("Payment proof must be an image (JPEG, PNG, WEBP, GIF or HEIC).")
    max_bytes = getattr(settings, "PAYMENT_PROOF_MAX_BYTES", 5 * 1024 * 1024)
    if file_obj.size > max_bytes:
        raise ValueError(f"Payment proof must be smaller than {max_bytes // (1024 * 1024) or 1} MB.")


def upload_payment_proof(file_obj):
    """Send the proof image to the upload endpoint and return ``(url, filename)``.

    There is no retry; any failure surfaces as ``ProofUploadError`` so the
    caller can abort before persisting anything.
    """
    url = settings.PAYMENT_PROOF_UPLOAD_URL
    file_obj.seek(0)
    files = {
        "image": (file_obj.name, file_obj.read(), getattr(file_obj, "content_type", "") or "application/octet-stream"),
    }
    try:
        response = requests.post(url, files=files, timeout=_upload_timeout())
    except requests.RequestException as exc:
        logger.warning("Payment proof upload to %s failed: %s", url, exc)
        raise ProofUploadError("Failed to upload payment proof.") from exc

    if not 200 <= response.status_code < 300:
        try:
            message = response.json().get("error")
        except Exception:
            message = f"Upload failed with status: {response.status_code}"
        logger.warning("Payment proof upload rejected (%s): %s", response.status_code, message)
        raise ProofUploadError(message or "Failed to upload payment proof.")

    try:
        result = response.json()
    except ValueError as exc:
        raise ProofUploadError("Payment proof upload did not return valid JSON.") from exc
    if not isinstance(result, dict):
        raise ProofUploadError("Payment proof upload was not successful or did not return expected data.")

    if not (result.get("success") and result.get("url") and result.get("filename")):
        raise ProofUploadError(
            result.get("error") or "Payment proof upload was not successful or did not return expected data."
        )
    return result["url"], result["filename"]
