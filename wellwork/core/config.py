"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del repositorio.
- Agrupa ajustes por área: App, CORS, Almacenamiento, Auth/JWT y Cliente offline.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from pathlib import Path

# Resuelve el .env ubicado en la raíz del repo (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "WellWork API"
    port: int = 5000
    log_level: str = "INFO"

    # CORS (en desarrollo se permite cualquier origen)
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = True

    # Almacenamiento en archivos JSON
    data_dir: str = "data"
    users_file: str = "user.json"
    notes_file: str = "notes.json"

    # Auth / JWT
    jwt_secret: str = "workwell-dev-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    password_min_length: int = 6
    login_rate_per_min: int = 10

    # Cliente offline-first
    api_url: str = Field(
        "http://localhost:5000",
        validation_alias=AliasChoices("WELLWORK_API_URL", "VITE_API_URL", "API_URL"),
    )
    client_storage_dir: str = "~/.wellwork"
    health_check_interval_seconds: float = 5.0
    health_check_timeout_seconds: float = 3.0
    request_timeout_seconds: float = 10.0
    sync_max_retries: int = 5

    # Recordatorios y notificaciones de bienestar
    reminder_interval_minutes: int = 30
    reminder_initial_delay_seconds: int = 5
    wellness_notifications_enabled: bool = True

    # --- Utilidades derivadas / helpers ---
    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def users_path(self) -> Path:
        return self.data_path / self.users_file

    @property
    def notes_path(self) -> Path:
        return self.data_path / self.notes_file

    @property
    def client_storage_path(self) -> Path:
        return Path(self.client_storage_dir).expanduser()

    @property
    def api_url_normalized(self) -> str:
        """Devuelve `api_url` sin '/' final (vacío si no hay valor)."""
        return (self.api_url or "").strip().rstrip("/")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
        populate_by_name=True,
    )


settings = Settings()
