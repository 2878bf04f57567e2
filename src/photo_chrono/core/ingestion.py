"""照片擷取流程：選取來源、讀取拍攝時間、產生預覽圖。"""

from __future__ import annotations

import random
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..config import ConfigManager
from ..models import ImageSource, Level, Photo
from ..utils import image_utils, time_utils
from ..utils.cancel import CancellationToken
from ..utils.error_handler import ErrorHandler
from ..utils.logger import get_logger
from .preset import DEFAULT_PRESET, PresetPhoto
from .preview_store import PreviewStore

CODE_DATE_FALLBACK = "I-201"
CODE_PREVIEW_FAILED = "W-202"
CODE_SOURCE_UNREADABLE = "W-203"


@dataclass
class IngestionResult:
    photos: List[Photo]
    required_count: int
    errors: ErrorHandler = field(default_factory=ErrorHandler)

    @property
    def ready(self) -> bool:
        return len(self.photos) == self.required_count

    @property
    def missing_count(self) -> int:
        return max(0, self.required_count - len(self.photos))


@dataclass
class _ItemOutcome:
    photo: Optional[Photo]
    errors: ErrorHandler


class PhotoIngestionPipeline:
    def __init__(
        self,
        config: ConfigManager,
        preview_store: PreviewStore,
        logger=None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.preview_store = preview_store
        self.clock = clock
        self.rng = rng or random.Random()
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self.batch_size = int(config.get("ingest.batch_size", 3))
        self.parallel_workers = int(config.get("ingest.parallel_workers", 3))
        self.selection = str(config.get("ingest.selection", "prefix"))
        self.image_exts = list(config.get("file_extensions.image", []))
        self.jpeg_quality = int(config.get("preview.jpeg_quality", 85))
        self.max_dimensions = {
            "desktop": int(config.get("preview.max_dimension_desktop", 1200)),
            "mobile": int(config.get("preview.max_dimension_mobile", 600)),
        }

    def max_dimension_for(self, layout: str) -> int:
        return self.max_dimensions.get(layout, self.max_dimensions["desktop"])

    def select_sources(self, sources: Sequence[ImageSource], level: Level) -> list[ImageSource]:
        """在處理前決定這一回合要用的來源；重試時沿用同一份結果。"""
        images = [item for item in sources if item.is_image(self.image_exts)]
        skipped = len(sources) - len(images)
        if skipped:
            self.logger.info(f"略過 {skipped} 個非影像來源")
        required = level.required_photo_count
        if len(images) <= required:
            return images
        if self.selection == "random":
            return self.rng.sample(images, required)
        return images[:required]

    def run(
        self,
        selected: Sequence[ImageSource],
        required_count: int,
        *,
        layout: str = "desktop",
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> IngestionResult:
        max_dimension = self.max_dimension_for(layout)
        result = IngestionResult(photos=[], required_count=required_count)
        processed = 0
        total = len(selected)

        for start in range(0, total, self.batch_size):
            if cancel_token is not None and cancel_token.is_cancelled():
                self.logger.info("擷取已取消")
                break
            batch = selected[start : start + self.batch_size]
            workers = max(1, min(self.parallel_workers, len(batch)))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_map = {
                    executor.submit(self._process_source, source, max_dimension): source
                    for source in batch
                }
                for future in as_completed(future_map):
                    outcome = future.result()
                    result.errors.extend(outcome.errors)
                    if outcome.photo is not None:
                        result.photos.append(outcome.photo)
                    processed += 1
                    if progress_callback is not None:
                        progress_callback(processed, total)

        if result.ready:
            self.logger.info(f"擷取完成，共 {len(result.photos)} 張照片")
        else:
            self.logger.warning(
                f"有效照片不足: {len(result.photos)}/{required_count}"
            )
        return result

    def ingest(
        self,
        sources: Sequence[ImageSource],
        level: Level,
        **kwargs,
    ) -> IngestionResult:
        selected = self.select_sources(sources, level)
        return self.run(selected, level.required_photo_count, **kwargs)

    def build_preset(self, dataset: Sequence[PresetPhoto] = DEFAULT_PRESET) -> IngestionResult:
        photos = [
            Photo(
                id=self.id_factory(),
                source_name=item.title,
                display_url=item.url,
                capture_date=item.capture_date,
                date_source="preset",
            )
            for item in dataset
        ]
        return IngestionResult(photos=photos, required_count=len(dataset))

    def _process_source(self, source: ImageSource, max_dimension: int) -> _ItemOutcome:
        errors = ErrorHandler()
        try:
            data = source.read_bytes()
        except (OSError, ValueError) as exc:
            self.logger.warning(f"無法讀取來源: {source.name} ({exc})")
            errors.add_warning(CODE_SOURCE_UNREADABLE, str(exc), source.name)
            return _ItemOutcome(photo=None, errors=errors)

        raw_value = image_utils.get_exif_datetime_original(data, source.name, self.logger)
        capture_date = time_utils.parse_exif_time(raw_value)
        date_source = "exif"
        if capture_date is None:
            capture_date = self.clock()
            date_source = "fallback"
            self.logger.info(f"CAPTURE_DATE_FALLBACK: {source.name}")
            errors.add_info(CODE_DATE_FALLBACK, "找不到拍攝時間，改用目前時間", source.name)

        preview = image_utils.build_preview(
            data,
            max_dimension,
            quality=self.jpeg_quality,
            name=source.name,
            logger=self.logger,
        )
        if preview is None:
            errors.add_warning(CODE_PREVIEW_FAILED, "無法產生預覽圖，已略過", source.name)
            return _ItemOutcome(photo=None, errors=errors)

        preview_bytes, _size = preview
        url = self.preview_store.put(preview_bytes, image_utils.PREVIEW_MEDIA_TYPE)
        photo = Photo(
            id=self.id_factory(),
            source_name=source.name,
            display_url=url,
            capture_date=capture_date,
            date_source=date_source,
            owns_preview=True,
        )
        return _ItemOutcome(photo=photo, errors=errors)
