# app/config.py
import os, json
import logging
from dotenv import load_dotenv
import firebase_admin
from firebase_admin import credentials, firestore, storage

load_dotenv()

logger = logging.getLogger(__name__)

PLACES_COLLECTION = os.getenv("PLACES_COLLECTION", "place_destination")
LABELS_COLLECTION = os.getenv("LABELS_COLLECTION", "labels")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "places")

PAGE_SIZE = 10
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))
ALLOWED_IMAGE_EXTENSIONS = (".jpeg", ".jpg", ".png", ".gif")

AUTH_COOKIE_NAME = "isAuthenticated"
AUTH_COOKIE_MAX_AGE = 7 * 24 * 60 * 60

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def _load_credentials():
    if os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
        return credentials.ApplicationDefault()
    if os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON"):
        return credentials.Certificate(json.loads(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")))
    if os.path.exists("./serviceAccountKey.json"):
        return credentials.Certificate("./serviceAccountKey.json")
    return None


def init_firebase():
    """Initialise the Firebase app and return ``(firestore_client, storage_bucket)``.

    Both are ``None`` when no credentials are available; endpoints that need
    the backend then answer 500.
    """
    cred = _load_credentials()
    if cred is None:
        logger.warning("Firebase credentials not found; backend calls are disabled.")
        return None, None

    if not firebase_admin._apps:
        firebase_admin.initialize_app(cred, {"storageBucket": STORAGE_BUCKET})
    return firestore.client(), storage.bucket(STORAGE_BUCKET)


db, bucket = init_firebase()
