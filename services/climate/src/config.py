"""
Configuration for climate summary service
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class ClimateConfig(BaseSettings):
    """Climate summary configuration"""
    
    # Registry configuration
    max_regions: int = 50  # One aggregate per US state
    
    # Input configuration
    delimiter: str = "\t"
    file_encoding: str = "utf-8"
    
    # Report configuration
    use_utc: bool = False  # Local time matches ctime() output
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    
    @field_validator("max_regions")
    @classmethod
    def check_max_regions(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_regions must be at least 1")
        return value
    
    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level
    
    @field_validator("delimiter")
    @classmethod
    def check_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delimiter must be a single character")
        return value
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CLIMATE_"


def get_config(**overrides) -> ClimateConfig:
    """Get climate configuration instance, with explicit overrides applied"""
    return ClimateConfig(**overrides)
