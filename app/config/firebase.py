"""
Firebase Firestore initialization.
Single-source-of-truth Firestore client for the Street Issue Reporter.

The client is created once at application startup (initialize_firestore)
and released at shutdown (close_firestore). Request code never touches the
module state directly; it asks get_db() for the client.
"""

import json
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore, initialize_app

from app.core.settings import Settings, settings

logger = logging.getLogger(__name__)

db = None
_active_settings: Settings = settings


def _load_credentials(cred_path: str) -> credentials.Certificate:
    if not os.path.exists(cred_path):
        raise FileNotFoundError(
            f"Firebase credentials file not found: {cred_path}\n"
            f"Please check your .env file and ensure FIREBASE_CREDENTIALS_PATH is correct.\n"
            f"Current working directory: {os.getcwd()}"
        )

    try:
        with open(cred_path, "r") as f:
            cred_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Firebase credentials file is not valid JSON: {e}\n"
            f"Please check the file at: {cred_path}"
        )

    required_fields = ["type", "project_id", "private_key", "client_email"]
    missing_fields = [field for field in required_fields if field not in cred_data]
    if missing_fields:
        raise ValueError(
            f"Firebase credentials file is missing required fields: {missing_fields}\n"
            f"Please download a fresh service account key from Firebase Console."
        )

    logger.info(f"[FIRESTORE] Credentials file validated: {cred_path}")
    logger.info(f"[FIRESTORE] Project ID: {cred_data.get('project_id', 'N/A')}")
    return credentials.Certificate(cred_path)


def initialize_firestore(app_settings: Optional[Settings] = None):
    """
    Create the Firestore client (or the mock client when USE_MOCK_DB is set).

    Raises RuntimeError with a readable explanation when initialization fails.
    """
    global db, _active_settings

    if app_settings is not None:
        _active_settings = app_settings
    cfg = _active_settings

    if db is not None:
        return db

    if cfg.USE_MOCK_DB:
        from app.config.mock_firestore import get_mock_db
        db = get_mock_db(cfg.MOCK_DB_PATH)
        logger.info(f"[FIRESTORE] USING MOCK DATABASE at {cfg.MOCK_DB_PATH}")
        return db

    try:
        if not firebase_admin._apps:
            options = {"projectId": cfg.FIREBASE_PROJECT_ID} if cfg.FIREBASE_PROJECT_ID else None
            if cfg.FIREBASE_CREDENTIALS_PATH:
                initialize_app(_load_credentials(cfg.FIREBASE_CREDENTIALS_PATH), options)
                logger.info("[FIRESTORE] Firebase Admin SDK initialized with service account")
            else:
                logger.info("[FIRESTORE] No credentials path set, using Application Default Credentials")
                initialize_app(options=options)

        db = firestore.client()
        logger.info("[FIRESTORE] USING REAL FIRESTORE DATABASE")
        logger.info(f"[FIRESTORE] Project: {cfg.FIREBASE_PROJECT_ID or 'default'}")
        return db

    except FileNotFoundError as e:
        raise RuntimeError(
            f"Firestore initialization FAILED - Credentials file not found.\n{e}"
        ) from e
    except ValueError as e:
        raise RuntimeError(
            f"Firestore initialization FAILED - Invalid credentials file.\n{e}\n"
            f"SOLUTION: Download a fresh service account key from Firebase Console "
            f"(Project Settings > Service Accounts > Generate New Private Key)."
        ) from e
    except Exception as e:
        raise RuntimeError(
            f"Firestore initialization FAILED. Error: {e}\n"
            f"Please check your Firebase credentials and configuration."
        ) from e


def get_db():
    """
    Get the initialized Firestore client.

    Raises RuntimeError if Firestore has not been initialized and cannot be.
    """
    if db is None:
        try:
            initialize_firestore()
        except Exception as e:
            raise RuntimeError(
                f"Firestore not initialized and initialization failed: {e}"
            ) from e
    return db


def close_firestore() -> None:
    """Release the client created by initialize_firestore."""
    global db

    if db is None:
        return
    try:
        db.close()
    except Exception as e:
        logger.warning(f"[FIRESTORE] Error while closing client: {e}")
    finally:
        db = None
