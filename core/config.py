"""
Core Module - Configuration.

============================================================
PURPOSE
============================================================
All runtime configuration for the document model layer.

Values are read from the environment; a `.env` file in the
working directory is loaded first when present.

============================================================
ENVIRONMENT
============================================================
DOCMODEL_DATABASE_URL              SQLAlchemy URL of the store
DOCMODEL_DATABASE_ECHO             Log SQL statements (true/false)
DOCMODEL_UUID_ALGORITHM            Default identifier algorithm
DOCMODEL_STRONG_RANDOM             Use the OS CSPRNG for identifiers
DOCMODEL_DESIGN_DOCUMENTS_PATHS    Search roots, os.pathsep separated
DOCMODEL_HASH_ALGORITHM            Digest for design document signatures
DOCMODEL_ENSURE_DESIGN_DOCUMENTS   Synchronize design documents at warm-up
DOCMODEL_LOG_LEVEL                 Logging level

============================================================
"""

import hashlib
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv


DEFAULT_DATABASE_URL = "sqlite:///docmodel.db"

KNOWN_ALGORITHMS = ("random", "utc_random", "sequential")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_paths(name: str) -> List[str]:
    value = os.getenv(name, "")
    return [path for path in value.split(os.pathsep) if path.strip()]


# ============================================================
# STORE CONFIGURATION
# ============================================================

@dataclass
class StoreConfig:
    """Connection settings for the SQL-backed document store."""
    
    database_url: str = DEFAULT_DATABASE_URL
    """SQLAlchemy database URL."""
    
    echo: bool = False
    """Log SQL statements."""
    
    pool_recycle_seconds: int = 1800
    """Recycle connections after N seconds."""
    
    @classmethod
    def from_env(cls) -> "StoreConfig":
        return cls(
            database_url=os.getenv("DOCMODEL_DATABASE_URL", DEFAULT_DATABASE_URL),
            echo=_env_bool("DOCMODEL_DATABASE_ECHO", False),
            pool_recycle_seconds=int(os.getenv("DOCMODEL_POOL_RECYCLE_SECONDS", "1800")),
        )
    
    def validate(self) -> List[str]:
        errors = []
        if not self.database_url:
            errors.append("database_url must not be empty")
        if self.pool_recycle_seconds < 1:
            errors.append("pool_recycle_seconds must be at least 1")
        return errors


# ============================================================
# IDENTIFIER CONFIGURATION
# ============================================================

@dataclass
class IdentifierConfig:
    """Identifier generation settings."""
    
    default_algorithm: str = "sequential"
    """Algorithm used when a model does not choose one."""
    
    strong_random: bool = False
    """Draw randomness from the OS CSPRNG instead of a seeded PRNG."""
    
    @classmethod
    def from_env(cls) -> "IdentifierConfig":
        return cls(
            default_algorithm=os.getenv("DOCMODEL_UUID_ALGORITHM", "sequential"),
            strong_random=_env_bool("DOCMODEL_STRONG_RANDOM", False),
        )
    
    def validate(self) -> List[str]:
        errors = []
        if self.default_algorithm not in KNOWN_ALGORITHMS:
            errors.append(
                f"default_algorithm must be one of {', '.join(KNOWN_ALGORITHMS)}"
            )
        return errors


# ============================================================
# SYNCHRONIZATION CONFIGURATION
# ============================================================

@dataclass
class SyncConfig:
    """Design document synchronization settings."""
    
    design_documents_paths: List[str] = field(default_factory=list)
    """Search roots for view sources, in precedence order."""
    
    hash_algorithm: str = "md5"
    """hashlib algorithm used for signatures."""
    
    ensure_design_documents: bool = True
    """Synchronize all registered models at warm-up."""
    
    @classmethod
    def from_env(cls) -> "SyncConfig":
        return cls(
            design_documents_paths=_env_paths("DOCMODEL_DESIGN_DOCUMENTS_PATHS"),
            hash_algorithm=os.getenv("DOCMODEL_HASH_ALGORITHM", "md5"),
            ensure_design_documents=_env_bool("DOCMODEL_ENSURE_DESIGN_DOCUMENTS", True),
        )
    
    def validate(self) -> List[str]:
        errors = []
        if self.hash_algorithm not in hashlib.algorithms_available:
            errors.append(f"hash_algorithm {self.hash_algorithm!r} is not available")
        if self.ensure_design_documents and not self.design_documents_paths:
            errors.append("design_documents_paths required when ensure_design_documents is set")
        return errors


# ============================================================
# APPLICATION CONFIGURATION
# ============================================================

@dataclass
class AppConfig:
    """Aggregate configuration."""
    
    store: StoreConfig = field(default_factory=StoreConfig)
    identifiers: IdentifierConfig = field(default_factory=IdentifierConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    log_level: str = "INFO"
    
    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "AppConfig":
        """Load configuration from environment variables (and .env)."""
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        return cls(
            store=StoreConfig.from_env(),
            identifiers=IdentifierConfig.from_env(),
            sync=SyncConfig.from_env(),
            log_level=os.getenv("DOCMODEL_LOG_LEVEL", "INFO"),
        )
    
    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []
        errors.extend(self.store.validate())
        errors.extend(self.identifiers.validate())
        errors.extend(self.sync.validate())
        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL,
        ):
            errors.append(f"log_level {self.log_level!r} is not a logging level")
        return errors
