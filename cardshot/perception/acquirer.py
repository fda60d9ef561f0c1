import time
import logging
import contextlib

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from cardshot.core.config import CaptureConfig
from cardshot.core.errors import WarmupTimeoutError
from cardshot.perception.frame import Frame, is_blank
from cardshot.perception.engines.base import BaseCaptureEngine


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WarmupPolicy:
    """
    跳过预热黑帧的上限

    任一上限可以为 None 表示不限制; 两者都为 None 时会一直等待非黑帧
    """
    max_attempts: Optional[int] = 120
    max_seconds: Optional[float] = 10.0

    @classmethod
    def from_config(cls, config: CaptureConfig) -> "WarmupPolicy":
        return cls(max_attempts=config.warmup_max_attempts, max_seconds=config.warmup_max_seconds)

    @classmethod
    def unbounded(cls) -> "WarmupPolicy":
        return cls(max_attempts=None, max_seconds=None)


@contextlib.contextmanager
def streaming(engine: BaseCaptureEngine) -> Iterator[BaseCaptureEngine]:
    """
    在 with 块内打开引擎的视频流

    无论以何种方式退出 (包括 start 失败), 都只 stop 和 release 一次。
    清理时的异常只记录日志, 不会替换正在传播的异常
    """
    try:
        engine.start()
        yield engine
    finally:
        try:
            engine.stop()
        except Exception as e:
            logger.error(f"Failed to stop stream: {e}", exc_info=True)
        try:
            engine.release()
        except Exception as e:
            logger.error(f"Failed to release camera: {e}", exc_info=True)


def acquire(engine: BaseCaptureEngine,
            policy: WarmupPolicy = WarmupPolicy(),
            clock: Callable[[], float] = time.monotonic) -> Frame:
    """
    持续读取直到得到第一帧非黑帧并返回

    只有黑帧会重试, 引擎抛出的 StreamOpenError, FrameReadError, DecodeError 直接向上传播

    Raises:
        WarmupTimeoutError: 在得到非黑帧之前达到预热上限
    """
    with streaming(engine):
        attempts = 0
        started = clock()
        while True:
            elapsed = clock() - started
            if policy.max_attempts is not None and attempts >= policy.max_attempts:
                raise WarmupTimeoutError(attempts, elapsed)
            if policy.max_seconds is not None and elapsed > policy.max_seconds:
                raise WarmupTimeoutError(attempts, elapsed)

            raw = engine.read_raw()
            attempts += 1
            frame = engine.decode(raw)
            logger.info(f"Captured image {frame.width}x{frame.height}")

            if not is_blank(frame):
                logger.debug(f"Got a non-blank frame after {attempts} reads")
                return frame
            logger.debug(f"Frame {attempts} is blank, waiting for the device to warm up")
