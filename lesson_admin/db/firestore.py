from __future__ import annotations

from google.cloud import firestore

from lesson_admin.core.config import settings


def lessons_col(client: firestore.Client):
    return client.collection(settings.lessons_collection)


def lesson_ref(client: firestore.Client, lesson_id: str):
    return lessons_col(client).document(lesson_id)


def screens_col(client: firestore.Client, lesson_id: str):
    # lessons/{lessonId}/screens
    return lesson_ref(client, lesson_id).collection(settings.screens_collection)
