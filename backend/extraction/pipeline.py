"""
Extraction pipeline: element stream → per-track samples → WAV bytes.

Responsibilities:
- Drive one demux pass over the element source, in arrival order
- Hand tagged frames to the aggregator
- Encode the result once the source reaches end-of-stream
- Log one terminal event per extraction and time each stage

Non-responsibilities:
- No transport, retries, or timeouts (the source owns those)
- No raw byte decoding (see container.tags for the tag boundary)

Concurrency & cancellation:
- Every call builds its own demuxer and aggregator; extractions share nothing.
- The async drivers suspend only while awaiting the next element.
- Cancellation propagates untouched; partial buffers are dropped with the
  call frame. There is no partial WAV output.

Usage example:

    extractor = create_extractor()
    wav = await extractor.extract_wave_async(elements_from_tags_async(decoder))
"""

from __future__ import annotations

import asyncio
import uuid
from typing import AsyncIterable, Dict, Iterable

import numpy as np

from audio.aggregator import SampleAggregator
from audio.wave_encoder import encode_wave
from config import ExtractorConfig
from container.elements import Element
from demux.frame_filter import AudioTrackDemuxer
from extraction.errors import SourceStreamFailure
from observability import logger
from observability.logger import log_event
from observability.metrics import now_ms, timed


def new_extraction_id() -> str:
    """Opaque identifier correlating one extraction's log events."""
    return f"ext_{uuid.uuid4().hex[:12]}"


# -------------------------
# Internal
# -------------------------

class _Extraction:
    """Per-call state: one demuxer, one aggregator."""

    def __init__(self, *, target_track_names: Iterable[str], extraction_id: str) -> None:
        self.extraction_id = extraction_id
        self.demuxer = AudioTrackDemuxer(
            target_track_names=target_track_names,
            extraction_id=extraction_id,
        )
        self.aggregator = SampleAggregator(extraction_id=extraction_id)

    def feed(self, element: Element) -> None:
        frame = self.demuxer.process(element)
        if frame is not None:
            self.aggregator.add(frame)

    def source_failed(self, exc: Exception) -> SourceStreamFailure:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "EXTRACTION_FAILED",
            "extraction_id": self.extraction_id,
            "reason": f"{type(exc).__name__}: {exc}",
            "demux": self.demuxer.snapshot(),
        })
        self.aggregator.clear()
        return SourceStreamFailure(f"element source failed: {type(exc).__name__}: {exc}")

    def cancelled(self) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "EXTRACTION_CANCELLED",
            "extraction_id": self.extraction_id,
            "demux": self.demuxer.snapshot(),
        })
        self.aggregator.clear()

    def finish(self) -> Dict[str, np.ndarray]:
        samples = self.aggregator.samples()
        log_event({
            "ts_ms": now_ms(),
            "event_type": "EXTRACTION_COMPLETE",
            "extraction_id": self.extraction_id,
            "demux": self.demuxer.snapshot(),
            "track_bytes": self.aggregator.snapshot(),
            "track_samples": {name: len(s) for name, s in samples.items()},
        })
        return samples


# -------------------------
# Samples
# -------------------------

def extract_samples(
    elements: Iterable[Element],
    *,
    target_track_names: Iterable[str] = (),
    extraction_id: str | None = None,
) -> Dict[str, np.ndarray]:
    """
    Demux and aggregate a synchronous element source.

    Returns:
        track_name → int16 samples for every selected audio track.

    Raises:
        SourceStreamFailure if iterating `elements` raises.
    """
    state = _Extraction(
        target_track_names=target_track_names,
        extraction_id=extraction_id or new_extraction_id(),
    )

    with timed("extract_samples", extraction_id=state.extraction_id):
        iterator = iter(elements)
        while True:
            try:
                element = next(iterator)
            except StopIteration:
                break
            except Exception as exc:  # pylint: disable=broad-exception-caught
                raise state.source_failed(exc) from exc
            state.feed(element)

        return state.finish()


async def extract_samples_async(
    elements: AsyncIterable[Element],
    *,
    target_track_names: Iterable[str] = (),
    extraction_id: str | None = None,
) -> Dict[str, np.ndarray]:
    """
    Demux and aggregate an asynchronous element source.

    Raises:
        SourceStreamFailure if iterating `elements` raises.
        asyncio.CancelledError if the awaiting task is cancelled.
    """
    state = _Extraction(
        target_track_names=target_track_names,
        extraction_id=extraction_id or new_extraction_id(),
    )

    with timed("extract_samples", extraction_id=state.extraction_id):
        iterator = elements.__aiter__()
        while True:
            try:
                element = await iterator.__anext__()
            except StopAsyncIteration:
                break
            except asyncio.CancelledError:
                state.cancelled()
                raise
            except Exception as exc:  # pylint: disable=broad-exception-caught
                raise state.source_failed(exc) from exc
            state.feed(element)

        return state.finish()


# -------------------------
# WAV
# -------------------------

def extract_wave(
    elements: Iterable[Element],
    *,
    target_track_names: Iterable[str] = (),
    extraction_id: str | None = None,
) -> bytes:
    """
    Extract the speaker tracks of a synchronous source as WAV bytes.

    Raises:
        SourceStreamFailure if iterating `elements` raises.
        NoQualifyingTracks if no recognized speaker track was extracted.
    """
    extraction_id = extraction_id or new_extraction_id()
    samples = extract_samples(
        elements,
        target_track_names=target_track_names,
        extraction_id=extraction_id,
    )
    with timed("encode_wave", extraction_id=extraction_id):
        return encode_wave(samples, extraction_id=extraction_id)


async def extract_wave_async(
    elements: AsyncIterable[Element],
    *,
    target_track_names: Iterable[str] = (),
    extraction_id: str | None = None,
) -> bytes:
    """
    Extract the speaker tracks of an asynchronous source as WAV bytes.

    Raises:
        SourceStreamFailure if iterating `elements` raises.
        NoQualifyingTracks if no recognized speaker track was extracted.
    """
    extraction_id = extraction_id or new_extraction_id()
    samples = await extract_samples_async(
        elements,
        target_track_names=target_track_names,
        extraction_id=extraction_id,
    )
    with timed("encode_wave", extraction_id=extraction_id):
        return encode_wave(samples, extraction_id=extraction_id)


# -------------------------
# Configured entry point
# -------------------------

class Extractor:
    """
    Extraction entry points bound to one ExtractorConfig.

    Stateless between calls; safe to share across concurrent extractions.
    """

    def __init__(self, config: ExtractorConfig) -> None:
        self.config = config

    def extract_samples(self, elements: Iterable[Element]) -> Dict[str, np.ndarray]:
        return extract_samples(
            elements, target_track_names=self.config.target_track_names
        )

    async def extract_samples_async(
        self, elements: AsyncIterable[Element]
    ) -> Dict[str, np.ndarray]:
        return await extract_samples_async(
            elements, target_track_names=self.config.target_track_names
        )

    def extract_wave(self, elements: Iterable[Element]) -> bytes:
        return extract_wave(
            elements, target_track_names=self.config.target_track_names
        )

    async def extract_wave_async(self, elements: AsyncIterable[Element]) -> bytes:
        return await extract_wave_async(
            elements, target_track_names=self.config.target_track_names
        )


def create_extractor(config: ExtractorConfig | None = None) -> Extractor:
    """
    Create an Extractor and apply process-level observability settings.

    Loads ExtractorConfig from the environment when none is given.
    """
    if config is None:
        config = ExtractorConfig.load_from_env()

    logger.set_enabled(config.enable_json_logs)

    return Extractor(config)
