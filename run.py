import sys
import logging
import argparse

import yaml
from pydantic import ValidationError

from cardshot.core.config import get_config, MergedConfig, SettingsConfig
from cardshot.core.errors import CardshotError, ConfigError
from cardshot.output.base import ClipboardSink
from cardshot.perception.devices import DeviceMatcher, list_video_devices
from cardshot.perception.engines.mock import MockCaptureEngine
from cardshot.screenshot import open_capture_card, perform_screenshot


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s'
)
logger = logging.getLogger(__name__)


def _load_config(args) -> MergedConfig:
    """
    读取配置目录并应用命令行覆盖项, 任何配置错误都转换为 ConfigError
    """
    try:
        config = get_config(args.config_dir)
        overrides = {}
        # 0 表示关闭对应的预热上限
        if args.max_attempts is not None:
            overrides['warmup_max_attempts'] = args.max_attempts or None
        if args.max_seconds is not None:
            overrides['warmup_max_seconds'] = args.max_seconds or None
        if overrides:
            config = MergedConfig.model_validate({**config.model_dump(), **overrides})
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    logging.getLogger().setLevel((args.log_level or config.log_level).upper())
    return config


def _report_error(title: str, message: str, use_dialog: bool):
    if not use_dialog:
        return
    from cardshot.ui.dialogs import show_error
    show_error(title, message)


def _start_application():
    """创建 Qt 应用并检查摄像头权限"""
    from cardshot.ui.dialogs import ensure_application, check_camera_permission
    app = ensure_application()
    check_camera_permission(app)
    return app


def _clipboard_sink() -> ClipboardSink:
    from cardshot.output.clipboard import QtClipboardSink
    return QtClipboardSink()


def main_snap(args) -> int:
    """
    截图流程: 查找采集卡, 等待非黑帧, 并复制到剪贴板。
    """
    # 配置加载失败时使用默认标题
    title = SettingsConfig().dialog_title

    try:
        config = _load_config(args)
        title = config.dialog_title

        app = _start_application()
        if args.mock:
            engine = MockCaptureEngine(blank_frames=3)
        else:
            engine = open_capture_card(config)
        frame = perform_screenshot(engine, config, _clipboard_sink())
        # 让剪贴板在退出前拿到数据
        app.processEvents()
        logger.info(f"Screenshot {frame.width}x{frame.height} is on the clipboard.")
        return 0

    except CardshotError as e:
        logger.error(str(e))
        _report_error(title, str(e), not args.no_dialog)
        return 1
    except Exception as e:
        logger.critical(f"Unexpected error while taking a screenshot: {e}", exc_info=True)
        _report_error(title, f"Unexpected error: {e}", not args.no_dialog)
        return 1


def main_list(args) -> int:
    """打印所有视频输入设备, 用 '*' 标出支持的采集卡"""
    config = _load_config(args)

    from cardshot.ui.dialogs import ensure_application
    ensure_application()
    matcher = DeviceMatcher.from_config(config)

    devices = list_video_devices()
    if not devices:
        print("No cameras found.")
        return 1
    for device in devices:
        marker = "*" if matcher.matches(device.name) else " "
        print(f"{marker} {device.index}: {device.name}")
    return 0


def _add_snap_options(parser: argparse.ArgumentParser, default):
    parser.add_argument("--no-dialog", action="store_true", default=default,
                        help="Log errors instead of showing a dialog")
    parser.add_argument("--mock", action="store_true", default=default,
                        help="Use a simulated capture card")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Copy a screenshot from an HDMI capture card to the clipboard")
    parser.add_argument("--config-dir", default=None, help="Directory of .yaml config files (default: ./configs)")
    parser.add_argument("--log-level", default=None, help="Override the configured logging level")
    parser.add_argument("--max-attempts", type=int, default=None,
                        help="Maximum frames to read while the card warms up (0 disables the bound)")
    parser.add_argument("--max-seconds", type=float, default=None,
                        help="Maximum seconds to wait for the card to warm up (0 disables the bound)")
    # 不带子命令时默认执行 snap, 所以 snap 的选项在顶层也可用
    _add_snap_options(parser, default=False)
    parser.set_defaults(func=main_snap)
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # 'snap' 命令, SUPPRESS 保证不会覆盖顶层已经给出的值
    parser_snap = subparsers.add_parser("snap", help="Take a screenshot (default)")
    _add_snap_options(parser_snap, default=argparse.SUPPRESS)
    parser_snap.set_defaults(func=main_snap)

    # 'list' 命令
    parser_list = subparsers.add_parser("list", help="List cameras; '*' marks supported capture cards")
    parser_list.set_defaults(func=main_list)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except CardshotError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.critical(f"Failed to start: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
