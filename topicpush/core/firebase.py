import logging

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore import Client as FirestoreClient

from topicpush.config import get_settings

logger = logging.getLogger(__name__)


def initialize_firebase() -> bool:
  """Initialize the Firebase Admin SDK; return whether an app is available."""
  if firebase_admin._apps:
    return True

  settings = get_settings()
  if not settings.firebase_project_id:
    logger.warning("Firebase Project ID not set. Firebase Admin SDK not initialized.")
    return False

  try:
    if settings.firebase_service_account_json_path:
      cred = credentials.Certificate(settings.firebase_service_account_json_path)
      firebase_admin.initialize_app(cred, {"projectId": settings.firebase_project_id})
    else:
      # Application Default Credentials (App Engine, Cloud Run, gcloud auth).
      firebase_admin.initialize_app(options={"projectId": settings.firebase_project_id})
    logger.info("Firebase Admin SDK initialized for project %s.", settings.firebase_project_id)
  except (ValueError, OSError) as exc:
    logger.error("Failed to initialize Firebase Admin SDK: %s", exc)
    return False

  return True


def firebase_available() -> bool:
  return bool(firebase_admin._apps) or initialize_firebase()


def get_firestore_client() -> FirestoreClient | None:
  """Return a Firestore client, or None when Firebase is not configured."""
  if not firebase_available():
    return None

  try:
    return firestore.client()
  except Exception as exc:  # noqa: BLE001
    logger.error("Failed to get Firestore client: %s", exc)
    return None
