"""設定檔驗證邏輯。"""

from __future__ import annotations

from typing import Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    def add_error(path: str, message: str) -> None:
        errors.append(f"{path}: {message}")

    levels = config.get("levels")
    if not isinstance(levels, list) or not levels:
        add_error("levels", "必須是非空清單")
    else:
        for index, level in enumerate(levels):
            prefix = f"levels[{index}]"
            if not isinstance(level, dict):
                add_error(prefix, "必須是物件")
                continue
            if not _is_positive_int(level.get("required_photo_count")):
                add_error(f"{prefix}.required_photo_count", "必須是正整數")
            if not _is_positive_int(level.get("time_limit_seconds")):
                add_error(f"{prefix}.time_limit_seconds", "必須是正整數")
            base_points = level.get("base_points")
            if not isinstance(base_points, int) or isinstance(base_points, bool) or base_points < 0:
                add_error(f"{prefix}.base_points", "必須是大於等於 0 的整數")
            display_name = level.get("display_name")
            if not isinstance(display_name, str) or not display_name.strip():
                add_error(f"{prefix}.display_name", "必須是非空字串")
            if not isinstance(level.get("description", ""), str):
                add_error(f"{prefix}.description", "必須是字串")

    ingest = config.get("ingest", {})
    if not _is_positive_int(ingest.get("batch_size")):
        add_error("ingest.batch_size", "必須是正整數")
    if not _is_positive_int(ingest.get("parallel_workers")):
        add_error("ingest.parallel_workers", "必須是正整數")
    if ingest.get("selection") not in {"prefix", "random"}:
        add_error("ingest.selection", "必須是 prefix 或 random")

    preview = config.get("preview", {})
    if not _is_positive_int(preview.get("max_dimension_desktop")):
        add_error("preview.max_dimension_desktop", "必須是正整數")
    if not _is_positive_int(preview.get("max_dimension_mobile")):
        add_error("preview.max_dimension_mobile", "必須是正整數")
    jpeg_quality = preview.get("jpeg_quality")
    if not isinstance(jpeg_quality, int) or not (1 <= jpeg_quality <= 95):
        add_error("preview.jpeg_quality", "必須介於 1 到 95")
    if preview.get("layout") not in {"desktop", "mobile"}:
        add_error("preview.layout", "必須是 desktop 或 mobile")

    file_extensions = config.get("file_extensions", {})
    image_exts = file_extensions.get("image", [])
    if not isinstance(image_exts, list) or any(not isinstance(item, str) for item in image_exts):
        add_error("file_extensions.image", "必須是字串清單")

    timer = config.get("timer", {})
    tick_interval_sec = timer.get("tick_interval_sec")
    caution_ratio = timer.get("caution_ratio")
    low_ratio = timer.get("low_ratio")
    if not isinstance(tick_interval_sec, (int, float)) or tick_interval_sec <= 0:
        add_error("timer.tick_interval_sec", "必須是大於 0 的數值")
    if not isinstance(caution_ratio, (int, float)) or not (0 <= caution_ratio <= 1):
        add_error("timer.caution_ratio", "必須介於 0 到 1")
    if not isinstance(low_ratio, (int, float)) or not (0 <= low_ratio <= 1):
        add_error("timer.low_ratio", "必須介於 0 到 1")
    if (
        isinstance(caution_ratio, (int, float))
        and isinstance(low_ratio, (int, float))
        and low_ratio > caution_ratio
    ):
        add_error("timer", "low_ratio 不可大於 caution_ratio")

    scoring = config.get("scoring", {})
    multiplier = scoring.get("time_bonus_multiplier")
    if not isinstance(multiplier, (int, float)) or isinstance(multiplier, bool) or multiplier < 0:
        add_error("scoring.time_bonus_multiplier", "必須是大於等於 0 的數值")

    session = config.get("session", {})
    if not isinstance(session.get("reset_score_on_completion"), bool):
        add_error("session.reset_score_on_completion", "必須是布林值")

    log_file = config.get("logging", {}).get("file")
    if log_file is not None and not isinstance(log_file, str):
        add_error("logging.file", "必須是字串或 null")

    return errors
