import sys
from pathlib import Path
from typing import Optional, Union

import firebase_admin
from firebase_admin import credentials
from firebase_admin import firestore as admin_firestore
from google.cloud import firestore


# -------------------------------------------------------
# Service account key (fail fast before any network call)
# -------------------------------------------------------

def require_service_account(path: Union[str, Path], project_id: Optional[str] = None) -> Path:
    """
    Returns the key path if it exists, otherwise prints download instructions
    and exits with status 1.

    The key is the JSON downloaded from Firebase Console:
    Project Settings > Service Accounts > Generate New Private Key
    """
    path = Path(path)
    if path.exists():
        return path

    print(f"❌ Error: {path.name} not found!", file=sys.stderr)
    if project_id:
        print("\nPlease download your service account key:")
        print("1. Go to Firebase Console: https://console.firebase.google.com/")
        print(f"2. Select your project: {project_id}")
        print("3. Go to Project Settings > Service Accounts")
        print('4. Click "Generate New Private Key"')
        print(f"5. Save as {path.name} in the project root")
    else:
        print("\nPlease download your service account key from Firebase Console")
    raise SystemExit(1)


# -------------------------------------------------------
# Firebase Admin initialization (idempotent)
# -------------------------------------------------------

def init_firebase(path: Union[str, Path]) -> firestore.Client:
    """
    Initializes the default firebase_admin app from a service account key
    exactly once and returns a Firestore client bound to it.

    A malformed key file raises (ValueError / OSError) and is left to the
    caller's top-level handler.
    """
    if not firebase_admin._apps:
        cred = credentials.Certificate(str(path))
        firebase_admin.initialize_app(cred)
    return admin_firestore.client()
