"""Unified configuration for the POS order engine.

This module provides a single, simple configuration class shared by the
order repository, the catalog store and the report engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pos_engine.exceptions import ConfigError

DEFAULT_DB_NAME = "restaurant-pos.db"
DEFAULT_TAX_RATE = Decimal("0.16")  # IVA (México)


@dataclass
class EngineConfig:
    """Everything the engine needs to open its store and price orders.

    Attributes:
        db_path: SQLite database file holding catalog and order history.
        tax_rate: Fixed tax fraction applied to every order subtotal.
        max_commit_retries: Attempts made for a commit that hits an order-number
            or lock conflict before PersistenceError is raised.
        timeout: Seconds a connection waits on a locked database.
    """

    db_path: Path
    tax_rate: Decimal = field(default_factory=lambda: DEFAULT_TAX_RATE)
    max_commit_retries: int = 3
    timeout: float = 5.0

    def __post_init__(self) -> None:
        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)
        if not isinstance(self.tax_rate, Decimal):
            try:
                self.tax_rate = Decimal(str(self.tax_rate))
            except InvalidOperation as e:
                raise ConfigError(f"tax_rate must be a decimal, got {self.tax_rate!r}") from e
        if not self.tax_rate.is_finite():
            raise ConfigError(f"tax_rate must be finite, got {self.tax_rate}")
        if self.tax_rate < 0:
            raise ConfigError(f"tax_rate must be non-negative, got {self.tax_rate}")
        if self.max_commit_retries < 1:
            raise ConfigError(
                f"max_commit_retries must be at least 1, got {self.max_commit_retries}"
            )
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_root(cls, data_root: str | Path, **overrides: object) -> EngineConfig:
        """Create an EngineConfig whose database lives under data_root.

        Args:
            data_root: Directory for the database file.
            **overrides: Any other EngineConfig field.

        Returns:
            EngineConfig instance.

        Examples:
            >>> config = EngineConfig.from_root("data")
            >>> config.db_path
            PosixPath('data/restaurant-pos.db')

        """
        if isinstance(data_root, str):
            data_root = Path(data_root)
        return cls(db_path=data_root / DEFAULT_DB_NAME, **overrides)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls, default_root: str | Path = "data") -> EngineConfig:
        """Build a config from POS_* environment variables.

        Reads:
            POS_DB_PATH: database file (default: <default_root>/restaurant-pos.db)
            POS_TAX_RATE: tax fraction (default: 0.16)
            POS_COMMIT_RETRIES: commit attempts (default: 3)
            POS_DB_TIMEOUT: busy timeout in seconds (default: 5)

        Raises:
            ConfigError: If a variable cannot be parsed.

        """
        db_path = os.environ.get("POS_DB_PATH")
        path = Path(db_path) if db_path else Path(default_root) / DEFAULT_DB_NAME

        try:
            tax_rate = Decimal(os.environ.get("POS_TAX_RATE", str(DEFAULT_TAX_RATE)))
        except InvalidOperation as e:
            raise ConfigError(f"Invalid POS_TAX_RATE: {os.environ.get('POS_TAX_RATE')!r}") from e

        try:
            retries = int(os.environ.get("POS_COMMIT_RETRIES", "3"))
            timeout = float(os.environ.get("POS_DB_TIMEOUT", "5"))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric POS_* setting: {e}") from e

        return cls(db_path=path, tax_rate=tax_rate, max_commit_retries=retries, timeout=timeout)

    def ensure_dirs(self) -> None:
        """Create the directory holding the database file."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
