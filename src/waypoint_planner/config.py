"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Planner settings loaded from ``WAYPOINT_PLANNER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WAYPOINT_PLANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Resource guard: a single shape never yields more waypoints than this
    max_waypoints_per_shape: int = 50_000

    # Substituted by the polyline strategy for non-positive inputs
    default_speed: float = 5.0
    default_altitude: float = 50.0
    default_line_spacing: float = 20.0

    # Sample spacing used when speed * photo interval is not positive
    min_sample_spacing: float = 20.0

    # Legacy call signature: circle radius when bounds[0].radius <= 0
    default_circle_radius: float = 100.0
    min_circle_points: int = 24

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


settings = Settings()
