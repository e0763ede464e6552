from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # Randomness source selection: "crypto" (OS CSPRNG) or "pseudo" (seedable)
    RANDOMNESS_SOURCE: Literal["crypto", "pseudo"] = "crypto"
    PSEUDO_RANDOM_SEED: int | None = None
    # Digestion and derivation defaults
    DEFAULT_DIGEST_ALGORITHM: str = "sha256"
    PBKDF2_ITERATIONS: int = 480000  # OWASP 2023 recommendation
    PBKDF2_OUTPUT_LENGTH: int = 32
    DEFAULT_KEY_PAIR_BITS: int = 4096

    model_config = SettingsConfigDict(
        env_prefix="SECRETSMITH_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
