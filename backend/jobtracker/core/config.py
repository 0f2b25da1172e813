# jobtracker/core/config.py
import os

from dotenv import load_dotenv


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


class Settings:
    def __init__(self) -> None:
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            # Local files must not influence prod.
            load_dotenv()

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

        # ----------------------------
        # Database
        # ----------------------------
        default_db = "" if self.ENV == "prod" else "sqlite:///./jobtracker.db"
        self.DATABASE_URL = os.getenv("DATABASE_URL", default_db).strip()

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # WebDAV (Nextcloud) file storage
        # ----------------------------
        # e.g. https://cloud.example.com/remote.php/dav/files/<user>
        self.WEBDAV_URL = os.getenv("WEBDAV_URL", "").strip().rstrip("/")
        self.WEBDAV_USERNAME = os.getenv("WEBDAV_USERNAME", "")
        self.WEBDAV_PASSWORD = os.getenv("WEBDAV_PASSWORD", "")
        self.WEBDAV_TIMEOUT_SECONDS = float(os.getenv("WEBDAV_TIMEOUT_SECONDS", "30"))
        self.WEBDAV_ROOT = "/" + os.getenv("WEBDAV_ROOT", "/job-tracker").strip().strip("/")

        # ----------------------------
        # Uploads
        # ----------------------------
        self.MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
        self.MAX_CONCURRENT_UPLOADS = int(os.getenv("MAX_CONCURRENT_UPLOADS", "4"))

        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")
        if not self.WEBDAV_URL:
            missing.append("WEBDAV_URL")
        if not self.WEBDAV_USERNAME:
            missing.append("WEBDAV_USERNAME")
        if not self.WEBDAV_PASSWORD:
            missing.append("WEBDAV_PASSWORD")
        if not self.CORS_ORIGINS:
            missing.append("CORS_ORIGINS")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

        if self.WEBDAV_URL and not self.WEBDAV_URL.startswith("https://"):
            raise RuntimeError("WEBDAV_URL should be https://... in prod")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"

    @property
    def webdav_enabled(self) -> bool:
        return bool(self.WEBDAV_URL)

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL


settings = Settings()
