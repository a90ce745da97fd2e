from pathlib import Path
from app.core.config import settings

def ensure_dirs():
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    Path(settings.EXPORT_DIR).mkdir(parents=True, exist_ok=True)

def upload_path(project_id: int, file_hash: str, file_name: str) -> Path:
    return Path(settings.UPLOAD_DIR) / f"{project_id}_{file_hash}{Path(file_name).suffix.lower()}"

def save_upload(data: bytes, dest_path: Path) -> Path:
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    # same hash means same content, keep the first copy
    if not dest_path.exists():
        dest_path.write_bytes(data)
    return dest_path
