"""
Text-to-speech playback for an opened post.

The speech service returns base64-encoded little-endian 16-bit PCM. It is
decoded once per post into float samples in [-1.0, 1.0) and replayed from
memory on every later toggle.

State machine (one controller per opened post):

    IDLE --toggle--> LOADING --payload--> PLAYING
                             --no payload--> IDLE (+ notice)
    PLAYING --toggle--> PAUSED        (elapsed time added to paused offset)
    PLAYING --buffer end--> PAUSED    (detected lazily against the output clock)
    PAUSED  --toggle--> PLAYING       (from paused offset, or 0 once past the end)
    any --aclose()--> IDLE            (output released, buffer dropped)
"""

import base64
import binascii
import enum
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from pratik_blog.config import settings
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)

PCM16_SCALE = 32768.0
UNAVAILABLE_NOTICE = "Sorry, audio generation is currently unavailable."


# --------------------------------------------------------------------------- #
# Decoding
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class AudioBuffer:
    samples: np.ndarray   # shape (channels, frames), float32
    sample_rate: int

    @property
    def channels(self) -> int:
        return self.samples.shape[0]

    @property
    def frames(self) -> int:
        return self.samples.shape[1]

    @property
    def duration(self) -> float:
        return self.frames / self.sample_rate

    def channel_data(self, channel: int) -> np.ndarray:
        return self.samples[channel]


def decode_base64(payload: str) -> bytes:
    return base64.b64decode(payload, validate=True)


def decode_pcm16(data: bytes, sample_rate: int = 24000, channels: int = 1) -> AudioBuffer:
    """
    Interleaved little-endian int16 PCM -> per-channel float32 samples.

    A trailing odd byte and any incomplete final frame are dropped.
    """
    if channels <= 0:
        raise ValueError("channels must be positive")

    usable = len(data) - (len(data) % 2)
    ints = np.frombuffer(data[:usable], dtype="<i2")
    frames = ints.size // channels
    interleaved = ints[: frames * channels].reshape(frames, channels)
    samples = interleaved.T.astype(np.float32) / np.float32(PCM16_SCALE)
    return AudioBuffer(samples=np.ascontiguousarray(samples), sample_rate=sample_rate)


def encode_pcm16(samples: np.ndarray) -> bytes:
    """Interleave (channels, frames) int16 samples into little-endian bytes."""
    ints = np.asarray(samples, dtype=np.int16)
    if ints.ndim == 1:
        ints = ints[np.newaxis, :]
    return ints.T.astype("<i2").tobytes()


# --------------------------------------------------------------------------- #
# Output
# --------------------------------------------------------------------------- #


class AudioOutput(Protocol):
    @property
    def current_time(self) -> float: ...

    def play(self, buffer: AudioBuffer, offset: float) -> None: ...

    def stop(self) -> None: ...

    def close(self) -> None: ...


class ClockAudioOutput:
    """Deviceless output: keeps time against a monotonic clock and tracks what is playing."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._origin = clock()
        self.playing: AudioBuffer | None = None
        self.offset = 0.0
        self.closed = False

    @property
    def current_time(self) -> float:
        return self._clock() - self._origin

    def play(self, buffer: AudioBuffer, offset: float) -> None:
        if self.closed:
            raise RuntimeError("audio output is closed")
        self.playing = buffer
        self.offset = offset

    def stop(self) -> None:
        self.playing = None

    def close(self) -> None:
        self.stop()
        self.closed = True


# --------------------------------------------------------------------------- #
# Playback controller
# --------------------------------------------------------------------------- #


class PlaybackState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    PAUSED = "paused"
    PLAYING = "playing"


def _log_notice(message: str) -> None:
    logger.warning("audio_notice", message=message)


class PlaybackController:
    """Single play/pause affordance for one post's narration."""

    def __init__(
        self,
        text: str,
        synthesize: Callable[[str], Awaitable[str | None]],
        output_factory: Callable[[], AudioOutput] = ClockAudioOutput,
        notify: Callable[[str], None] = _log_notice,
        sample_rate: int | None = None,
        channels: int | None = None,
    ):
        self.text = text
        self._synthesize = synthesize
        self._output_factory = output_factory
        self._notify = notify
        self.sample_rate = sample_rate or settings.audio_sample_rate
        self.channels = channels or settings.audio_channels

        self.buffer: AudioBuffer | None = None
        self.is_playing = False
        self.is_loading = False
        self.paused_offset = 0.0
        self.started_at = 0.0

        self._output: AudioOutput | None = None
        self._closed = False

    async def __aenter__(self) -> "PlaybackController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #

    @property
    def state(self) -> PlaybackState:
        self._check_ended()
        if self.is_loading:
            return PlaybackState.LOADING
        if self.buffer is None:
            return PlaybackState.IDLE
        return PlaybackState.PLAYING if self.is_playing else PlaybackState.PAUSED

    @property
    def position(self) -> float:
        """Seconds into the buffer."""
        if self.is_playing and self._output is not None:
            return self.paused_offset + (self._output.current_time - self.started_at)
        return self.paused_offset

    def _acquire_output(self) -> AudioOutput:
        if self._output is None:
            self._output = self._output_factory()
            logger.debug("audio_output_acquired")
        return self._output

    def _check_ended(self) -> None:
        if not self.is_playing or self.buffer is None:
            return
        if self.position >= self.buffer.duration:
            self._output.stop()
            self.is_playing = False
            self.paused_offset = self.buffer.duration
            logger.debug("audio_playback_ended", duration=self.buffer.duration)

    def _start(self, offset: float) -> None:
        output = self._acquire_output()
        output.play(self.buffer, offset)
        self.started_at = output.current_time
        self.is_playing = True

    def _pause(self) -> None:
        output = self._acquire_output()
        output.stop()
        self.paused_offset += output.current_time - self.started_at
        self.is_playing = False

    async def toggle(self) -> PlaybackState:
        if self._closed:
            return PlaybackState.IDLE
        if self.is_loading:
            return PlaybackState.LOADING

        self._acquire_output()
        self._check_ended()

        if self.is_playing:
            self._pause()
            logger.info("audio_paused", offset=round(self.paused_offset, 3))
            return PlaybackState.PAUSED

        if self.buffer is not None:
            if self.paused_offset >= self.buffer.duration:
                self.paused_offset = 0.0
            self._start(self.paused_offset)
            logger.info("audio_resumed", offset=round(self.paused_offset, 3))
            return PlaybackState.PLAYING

        return await self._load_and_play()

    async def _load_and_play(self) -> PlaybackState:
        self.is_loading = True
        try:
            payload = await self._synthesize(self.text)
        finally:
            self.is_loading = False

        if self._closed:
            logger.debug("audio_result_discarded")
            return PlaybackState.IDLE

        buffer = None
        if payload:
            try:
                buffer = decode_pcm16(decode_base64(payload), self.sample_rate, self.channels)
            except (binascii.Error, ValueError) as exc:
                logger.warning("audio_decode_failed", error=str(exc))

        if buffer is None or buffer.frames == 0:
            self._notify(UNAVAILABLE_NOTICE)
            return PlaybackState.IDLE

        self.buffer = buffer
        self.paused_offset = 0.0
        self._start(0.0)
        logger.info("audio_started", duration=round(buffer.duration, 3))
        return PlaybackState.PLAYING

    async def aclose(self) -> None:
        """Stop playback and release the output. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.is_playing = False
        self.buffer = None
        if self._output is not None:
            try:
                self._output.stop()
            finally:
                self._output.close()
                self._output = None
            logger.debug("audio_output_released")
