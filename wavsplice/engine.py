"""Orchestrator: picks the processor for a config and runs it."""

import logging
from pathlib import Path

from wavsplice.config import NormalizeConfig, ProcessorConfig, SpliceConfig
from wavsplice.errors import InvalidConfigError
from wavsplice.models import ProcessingResult
from wavsplice.processors.base import AudioProcessor
from wavsplice.processors.normalize import NormalizeProcessor
from wavsplice.processors.splice import SpliceProcessor

logger = logging.getLogger(__name__)

PROCESSORS: dict[str, type[AudioProcessor]] = {
    SpliceConfig.type: SpliceProcessor,
    NormalizeConfig.type: NormalizeProcessor,
}


def get_processor(config: ProcessorConfig | str) -> AudioProcessor:
    """Return the processor for a config variant or a type tag."""
    kind = config if isinstance(config, str) else getattr(config, "type", None)
    try:
        return PROCESSORS[kind]()
    except KeyError:
        raise InvalidConfigError(f"Unknown processor type: {kind!r}") from None


def process(
    source_path: Path, output_dir: Path, config: ProcessorConfig
) -> ProcessingResult:
    """Run the processor matching ``config`` on ``source_path``."""
    processor = get_processor(config)
    result = processor.process(Path(source_path), Path(output_dir), config)
    logger.info(
        "%s produced %d file(s) in %d ms",
        processor.processor_type(),
        len(result.files),
        result.metadata.processing_time_ms,
    )
    return result
