"""Firebase Admin SDK initialization (lazy loaded)."""

import logging

import firebase_admin
from firebase_admin import credentials

from shop_api.config.settings import Settings

logger = logging.getLogger(__name__)

_firebase_app = None


def get_firebase_app(settings: Settings) -> firebase_admin.App:
    """Get or initialize the Firebase Admin app."""
    global _firebase_app

    if _firebase_app is not None:
        return _firebase_app

    # Check if already initialized
    try:
        _firebase_app = firebase_admin.get_app()
        return _firebase_app
    except ValueError:
        pass

    # Initialize from service account file or environment
    if settings.firebase_credentials_path:
        cred = credentials.Certificate(settings.firebase_credentials_path)
    else:
        # Use Application Default Credentials
        cred = credentials.ApplicationDefault()

    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    _firebase_app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase Admin SDK initialized")
    return _firebase_app
