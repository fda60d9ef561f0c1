import logging

from typing import Callable, List, Optional

from cardshot.core.config import MergedConfig
from cardshot.output.base import ClipboardSink
from cardshot.perception.acquirer import acquire, WarmupPolicy
from cardshot.perception.devices import DeviceInfo, DeviceMatcher, find_capture_card, list_video_devices
from cardshot.perception.engines.base import BaseCaptureEngine
from cardshot.perception.engines.opencv import OpenCVCaptureEngine
from cardshot.perception.frame import Frame


logger = logging.getLogger(__name__)


def open_capture_card(config: MergedConfig,
                      devices: Optional[List[DeviceInfo]] = None,
                      engine_class: Callable[..., BaseCaptureEngine] = OpenCVCaptureEngine) -> BaseCaptureEngine:
    """
    查找第一个支持的采集卡并为其创建采集引擎

    Raises:
        NoDeviceFound: 没有设备名称匹配配置中的正则表达式
    """
    if devices is None:
        devices = list_video_devices()
    device = find_capture_card(devices, DeviceMatcher.from_config(config))
    logger.info(f"Found camera: {device}")
    return engine_class(config, device)


def perform_screenshot(engine: BaseCaptureEngine, config: MergedConfig, sink: ClipboardSink) -> Frame:
    """从引擎获取一帧非黑帧, 原样交给剪贴板输出"""
    frame = acquire(engine, WarmupPolicy.from_config(config))
    sink.set_image(frame)
    return frame
