"""Package configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime settings, overridable via ``SHADOWBAKER_*`` environment variables."""

    # Pipeline limits
    MAX_BLUR_RADIUS: int = 64
    PREVIEW_CACHE_SIZE: int = 8  # Cached preview renders

    # Apply spread to baked output as well as to the preview
    SPREAD_IN_BAKE: bool = False

    # Output naming defaults
    DEFAULT_OUTPUT_FOLDER: str = "Assets/Textures/DropShadows"
    DEFAULT_FILE_SUFFIX: str = "_shadow"

    model_config = {"env_prefix": "SHADOWBAKER_"}


settings = Settings()
