"""
Firestore client construction
"""

from pathlib import Path
from typing import Optional
from google.cloud import firestore
from google.oauth2 import service_account
from core.config import Settings, settings
from core.exceptions import TargetInitializationError
import logging

logger = logging.getLogger(__name__)


def load_credentials(credentials_path: str) -> service_account.Credentials:
    """Load service account credentials from a JSON key file"""
    path = Path(credentials_path)
    if not path.is_file():
        raise TargetInitializationError(
            "Service account file not found",
            context={"credentials_path": str(path)}
        )

    try:
        return service_account.Credentials.from_service_account_file(str(path))
    except Exception as e:
        raise TargetInitializationError(
            "Failed to load service account credentials",
            context={"credentials_path": str(path)},
            original_exception=e
        )


def create_firestore_client(
    config: Settings = settings,
    credentials: Optional[service_account.Credentials] = None
) -> firestore.AsyncClient:
    """
    Create the process-wide Firestore client.

    Called once at startup; the returned client is shared by every table
    and batch of the run.

    Raises:
        TargetInitializationError: If credentials are missing or invalid
    """
    if credentials is None:
        credentials = load_credentials(config.FIREBASE_CREDENTIALS_PATH)

    project = config.FIREBASE_PROJECT_ID or getattr(credentials, "project_id", None)

    try:
        client = firestore.AsyncClient(project=project, credentials=credentials)
    except Exception as e:
        raise TargetInitializationError(
            "Failed to initialize Firestore client",
            context={
                "credentials_path": config.FIREBASE_CREDENTIALS_PATH,
                "project": project
            },
            original_exception=e
        )

    logger.info(f"Firestore initialized (project={project})")
    return client
