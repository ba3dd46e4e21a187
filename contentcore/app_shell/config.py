import os
from pathlib import Path


class Settings:
    """Paths resolved from the environment."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CONTENTCORE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "contentcore.db")
        self.rules_path = Path(
            os.environ.get("CONTENTCORE_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = Path(__file__).resolve().parents[2] / "migrations"
