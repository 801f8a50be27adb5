import json
import os

from minbar.config import settings


class StorageService:
    @staticmethod
    def khutbah_dir(khutbah_id: int) -> str:
        """Return the path for a khutbah's directory under storage_root."""
        return os.path.join(settings.storage_root, f"khutbah_{khutbah_id:04d}")

    @staticmethod
    def ensure_dirs(khutbah_dir: str) -> None:
        """Create the standard subdirectory layout for a khutbah."""
        for sub in ("uploads", "cards"):
            os.makedirs(os.path.join(khutbah_dir, sub), exist_ok=True)

    @staticmethod
    def write_json(path: str, data: dict | list) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

