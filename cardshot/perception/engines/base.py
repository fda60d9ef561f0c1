import numpy as np

from abc import ABC, abstractmethod

from cardshot.perception.frame import Frame, PixelLayout


class BaseCaptureEngine(ABC):
    """
    采集引擎的抽象基类, 对应一个已协商好格式的设备句柄

    同一时间最多只有一个打开的视频流。即使 start 失败或从未调用, stop 和 release 也必须可以安全调用
    """
    layout: PixelLayout = PixelLayout.RGB

    @abstractmethod
    def start(self):
        """开始取流, 设备拒绝时抛出 StreamOpenError"""
        pass

    @abstractmethod
    def read_raw(self) -> np.ndarray:
        """阻塞直到下一帧原始数据到达, 失败时抛出 FrameReadError"""
        pass

    @abstractmethod
    def decode(self, raw: np.ndarray) -> Frame:
        """将原始数据解码为 self.layout 格式的 Frame, 数据异常时抛出 DecodeError"""
        pass

    @abstractmethod
    def stop(self):
        """停止取流"""
        pass

    @abstractmethod
    def release(self):
        """释放设备句柄"""
        pass

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass
