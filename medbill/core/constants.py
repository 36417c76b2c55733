"""Application-wide constants."""

APP_NAME = "medbill"
VERSION = "1.0.0"

SUPPORTED_IMAGE_FORMATS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp")
