"""
Engine configuration model

Validated form of config.yaml (see ConfigManager).
"""

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Engine settings loaded from YAML"""
    animations_dir: str = Field(
        "ckb-animations",
        description="Directory scanned for animation script executables",
    )
    fps: int = Field(60, ge=1, le=240, description="Frame scheduler tick rate")
    info_timeout: float = Field(
        1.0, gt=0, description="Seconds a script may take to answer --ckb-info"
    )
    kill_timeout: float = Field(
        1.0, ge=0, description="Seconds to wait for a killed script to exit on close"
    )
    log_level: str = Field("INFO", description="DEBUG, INFO, WARN or ERROR")
    use_colors: bool = Field(True, description="ANSI colors in log output")

    class Config:
        json_schema_extra = {
            "example": {
                "animations_dir": "/usr/lib/ckb-animations",
                "fps": 60,
                "info_timeout": 1.0,
                "kill_timeout": 1.0,
                "log_level": "INFO",
                "use_colors": True,
            }
        }
