"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings

from .engine.layout import LayoutConfig


class Settings(BaseSettings):
    app_name: str = "Pipeline Editor"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Auto-layout defaults
    layout_node_width: float = 120
    layout_layer_height: float = 150
    layout_canvas_width: float = 800
    layout_origin_x: float = 100
    layout_origin_y: float = 50

    model_config = {"env_prefix": "PIPELINE_"}

    def layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            node_width=self.layout_node_width,
            layer_height=self.layout_layer_height,
            canvas_width=self.layout_canvas_width,
            origin_x=self.layout_origin_x,
            origin_y=self.layout_origin_y,
        )


settings = Settings()
