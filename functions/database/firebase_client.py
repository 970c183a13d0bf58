import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import firebase_admin
from fastapi import Request
from firebase_admin import auth, credentials, firestore, storage

from functions.config import settings

logger = logging.getLogger(__name__)


@dataclass
class FirebaseClients:
    """Handles to the managed services, built once per process and injected into requests."""
    db: Any  # google.cloud.firestore.Client
    bucket: Any  # google.cloud.storage.Bucket
    auth: Any  # firebase_admin.auth.Client
    app: Optional[firebase_admin.App] = None


def _load_credentials():
    """Service account key as JSON string or file path; application default credentials otherwise."""
    key = settings.gcp_service_account_key
    if not key:
        return credentials.ApplicationDefault()
    if os.path.isfile(key):
        return credentials.Certificate(key)
    return credentials.Certificate(json.loads(key))


def create_firebase_clients() -> FirebaseClients:
    options = {}
    if settings.gcp_project_id:
        options["projectId"] = settings.gcp_project_id
    bucket_name = settings.storage_bucket
    if not bucket_name and settings.gcp_project_id:
        bucket_name = f"{settings.gcp_project_id}.appspot.com"
    if bucket_name:
        options["storageBucket"] = bucket_name

    try:
        app = firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app(_load_credentials(), options=options)

    logger.info("Firebase Admin initialized (project=%s, bucket=%s)", settings.gcp_project_id, bucket_name)
    return FirebaseClients(
        db=firestore.client(app),
        bucket=storage.bucket(app=app),
        auth=auth.Client(app),
        app=app,
    )


def get_firebase(request: Request) -> FirebaseClients:
    return request.app.state.firebase
