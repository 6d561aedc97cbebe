from pathlib import Path

from pydantic_settings import BaseSettings

PACKAGE_DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    APP_NAME: str = "PCB Quote Engine"
    LOG_LEVEL: str = "INFO"

    # Reference data: JSON tables, swappable without a code change
    DATA_DIR: Path = PACKAGE_DATA_DIR
    PRICING_TABLE_FILE: str = "pcb_pricing.json"
    SHIPPING_TABLE_FILE: str = "shipping_rates.json"
    STENCIL_TABLE_FILE: str = "stencil_pricing.json"
    CALENDAR_FILE: str = "calendar_cn.json"

    # Order intake rules
    ORDER_CUTOFF_HOUR: int = 20
    MAX_RUSH_REDUCTION_DAYS: int = 2

    # Calendar data quality: True raises on holiday/working-weekend overlap
    STRICT_CALENDAR: bool = False

    class Config:
        env_file = ".env"

    def data_path(self, filename: str) -> Path:
        return Path(self.DATA_DIR) / filename


settings = Settings()
