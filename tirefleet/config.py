import os
from pathlib import Path


class Settings:
    """Application settings with environment variable overrides."""

    APP_NAME: str = "Tire Fleet Stock Tracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
    DB_PATH: Path = DATA_DIR / "tirefleet.db"

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"sqlite+aiosqlite:///{DB_PATH}",
    )

    # CORS
    ALLOWED_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost").split(",")
        if o.strip()
    ]

    # Business constants
    DEFAULT_LOCATION: str = os.getenv("DEFAULT_LOCATION", "Bengkel Krc")
    IMPORT_ACTOR: str = "Import"
    IMPORT_NOTE: str = "Import Excel"
    STOCK_IN_NOTE: str = "Ban Baru Masuk"
    DEFAULT_USER: str = "Admin"
    DRIVER_PLACEHOLDER: str = "Belum Ada"
    BRAND_PLACEHOLDER: str = "-"
    LOW_STOCK_THRESHOLD: int = 5
    RECENT_TRANSACTIONS_LIMIT: int = 10

    # Fixed option lists. Brands are free text, so there is no brand list.
    SIZE_OPTIONS: list[str] = [
        "BAN TMD 97 11.00",
        "BAN TMD 18 10.00",
        "BAN MRF M77 11.00",
        "BAN MASAK",
    ]
    CONDITION_OPTIONS: list[str] = ["Baru", "Bekas Baik", "Bekas Cukup", "Perlu Repair"]
    VEHICLE_GROUPS: list[str] = ["RKI", "TEAM", "TKN", "GAB", "RSI", "TONI"]
    VEHICLE_TYPES: list[str] = ["FAW", "FUSO"]


settings = Settings()
