import re
import yaml

from pathlib import Path
from typing import Dict, Any, List, Optional, Literal

from pydantic import BaseModel, Field, ConfigDict, field_validator


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_DEVICE_PATTERNS = [r"^UGREEN HDMI Capture$", r"^Live Gamer .*-Video$"]


class SettingsConfig(BaseModel):
    log_level: str = Field('INFO', description="日志级别")
    dialog_title: str = Field("Capture Card Screenshot", description="错误对话框标题")


class CaptureConfig(BaseModel):
    device_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_DEVICE_PATTERNS),
        description="用于匹配采集卡名称的正则表达式",
    )
    backend: Literal['auto', 'dshow', 'msmf', 'v4l2', 'avfoundation'] = Field('auto', description="OpenCV 采集后端")
    requested_width: int = Field(10000, gt=0, description="请求的宽度, 驱动会自动限制到最大分辨率")
    requested_height: int = Field(10000, gt=0, description="请求的高度, 驱动会自动限制到最大分辨率")
    warmup_max_attempts: Optional[int] = Field(120, gt=0, description="跳过黑帧时最多读取的帧数")
    warmup_max_seconds: Optional[float] = Field(10.0, gt=0, description="跳过黑帧时最多等待的秒数")

    @field_validator('device_patterns')
    @classmethod
    def _patterns_compile(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("device_patterns must not be empty")
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid device pattern {pattern!r}: {e}") from e
        return value


class MergedConfig(SettingsConfig, CaptureConfig):
    """一个包含所有配置字段的统一模型"""
    model_config = ConfigDict(extra='allow')


def load_and_merge_configs(config_dir: Path) -> Dict[str, Any]:
    """
    从指定目录加载所有 .yaml 文件, 按文件名顺序合并, 后面的文件覆盖前面的
    """
    merged_data = {}
    if not config_dir.is_dir():
        raise FileNotFoundError(f"Config directory does not exist: {config_dir}")

    for config_file in sorted(config_dir.glob('*.yaml')):
        with open(config_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
            if data:
                merged_data.update(data)
    return merged_data


def get_config(config_dir: Optional[Path] = None) -> MergedConfig:
    """
    加载、合并、验证并返回应用程序的配置对象
    """
    config_path = Path(config_dir) if config_dir is not None else PROJECT_ROOT / 'configs'
    merged_data = load_and_merge_configs(config_path)
    return MergedConfig.model_validate(merged_data)
