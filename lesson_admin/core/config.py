from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    # Filesystem
    project_root: Path = PROJECT_ROOT
    service_account_file: str = "serviceAccountKey.json"
    seed_file: str = "rsi_lesson_seed.json"

    # Firebase
    firebase_project_id: str = "marketcoach-db8f4"

    # Firestore layout
    lessons_collection: str = "lessons"
    screens_collection: str = "screens"

    @property
    def service_account_path(self) -> Path:
        return self.project_root / self.service_account_file

    @property
    def seed_path(self) -> Path:
        return self.project_root / self.seed_file


settings = Settings()
