"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Tuple


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("./data")


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""
    
    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    
    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    
    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "3600")))
    
    # Production value = catalog value * markup
    PRODUCTION_MARKUP: float = 2.3
    
    # Weight class -> fraction of one normalised job
    WEIGHT_MULTIPLIERS: Dict[int, float] = field(default_factory=lambda: {1: 1.0, 2: 0.5, 3: 0.25})
    DEFAULT_WEIGHT_MULTIPLIER: float = 1.0
    
    # Finishing flag (report emphasis only)
    FINISHING_PROGRESS_THRESHOLD: float = 85.0
    FINISHING_WINDOW_HOURS: float = 24.0
    
    # Default split when both primary and secondary are set
    DEFAULT_SHARED_SPLIT_PCT: float = 50.0
    
    UNASSIGNED_BUCKET: str = "Unassigned"
    
    # Role keyword matching (lower-cased, accents stripped before matching)
    HELPER_ROLE_KEYWORDS: Tuple[str, ...] = ("ajudante", "auxiliar", "helper", "assistant")
    TECHNICIAN_ROLE_KEYWORDS: Tuple[str, ...] = ("tecnico", "assistencia", "technician", "service")
    
    @property
    def processed_dir(self) -> Path:
        return self.data_dir / "processed"
    
    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


# Table file names
TABLE_FILES = {
    "workers": "workers",
    "jobs": "jobs",
}

# Required columns (hard fail if missing)
REQUIRED_COLUMNS = {
    "workers": [
        "worker_id",
        "worker_name",
        "role",
    ],
    "jobs": [
        "job_id",
        "project_id",
        "job_name",
        "primary_worker_id",
        "scheduled_start",
        "progress_pct",
        "catalog_value",
    ],
}

# Optional columns (soft warn if missing)
OPTIONAL_COLUMNS = {
    "jobs": [
        "project_name",
        "secondary_worker_id",
        "helper_worker_id",
        "primary_share_pct",
        "secondary_share_pct",
        "scheduled_end",
        "completion_date",
        "weight_class",
        "advance_pct",
        "advance_recognized_pct",
        "advance_month",
        "is_service_call",
        "purchase_order",
    ],
}

# Formatting constants
FORMAT_CURRENCY = "${:,.0f}"
FORMAT_CURRENCY_DECIMAL = "${:,.2f}"
FORMAT_PERCENT = "{:.1f}%"
FORMAT_COUNT = "{:,}"
