"""
Tone output for chip8emu.
Uses pygame.mixer to play a short beep each time the machine's sound timer
runs down to zero.

The CHIP-8 has no sound hardware beyond that one edge, so the device holds a
single pre-built ``pygame.mixer.Sound``: either a WAV file supplied by the
user (such as a ``beep.wav``) or a square wave
synthesised with numpy.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pygame

logger = logging.getLogger(__name__)

_SAMPLE_RATE: int = 44100
_MIXER_BUFFER_SAMPLES: int = 512

# Synthesised beep parameters.
_TONE_HZ: float = 440.0
_TONE_SECONDS: float = 0.1
_TONE_AMPLITUDE: int = 8000


def square_wave(
    frequency: float = _TONE_HZ,
    seconds: float = _TONE_SECONDS,
    sample_rate: int = _SAMPLE_RATE,
    amplitude: int = _TONE_AMPLITUDE,
) -> np.ndarray:
    """Return a signed 16-bit mono square wave."""
    count = int(sample_rate * seconds)
    t = np.arange(count, dtype=np.float64) / sample_rate
    phase = np.floor(2.0 * frequency * t).astype(np.int64) & 1
    return np.where(phase == 0, amplitude, -amplitude).astype(np.int16)


class ToneDevice:
    """Play a one-shot beep on demand.

    Parameters
    ----------
    enabled:
        Set to ``False`` to create the device in a silent / no-op mode.
    wav_path:
        Optional WAV file to play instead of the synthesised tone.
    """

    def __init__(self, *, enabled: bool = True, wav_path: Optional[str] = None) -> None:
        self._enabled: bool = enabled
        self._wav_path: Optional[str] = wav_path
        self._sound: Optional[pygame.mixer.Sound] = None
        self.beeps: int = 0

        if not self._enabled:
            logger.info("ToneDevice: disabled (silent mode)")
            return

        self._init_mixer()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    def play_tone(self) -> None:
        """Start the beep.  Suitable as a ``Chip8Machine.on_tone`` callback."""
        self.beeps += 1
        if not self._enabled or self._sound is None:
            return
        self._sound.stop()
        self._sound.play()

    def shutdown(self) -> None:
        """Stop playback and release the mixer."""
        self._shutdown_mixer()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _init_mixer(self) -> None:
        # pygame.init() may already have opened the mixer with its own
        # defaults; re-open it with ours.
        if pygame.mixer.get_init():
            pygame.mixer.quit()
        try:
            pygame.mixer.init(
                frequency=_SAMPLE_RATE,
                size=-16,       # signed 16-bit
                channels=1,     # mono
                buffer=_MIXER_BUFFER_SAMPLES,
            )
        except pygame.error as exc:
            logger.error("ToneDevice: mixer init failed: %s", exc)
            self._enabled = False
            return

        if self._wav_path is not None:
            try:
                self._sound = pygame.mixer.Sound(self._wav_path)
                logger.info("ToneDevice: loaded beep from %s", self._wav_path)
                return
            except (pygame.error, FileNotFoundError) as exc:
                logger.warning(
                    "ToneDevice: could not load %s (%s); using synthesised tone",
                    self._wav_path,
                    exc,
                )

        freq, size, channels = pygame.mixer.get_init()
        wave = square_wave(sample_rate=freq)
        if channels > 1:
            wave = np.repeat(wave[:, np.newaxis], channels, axis=1)
        self._sound = pygame.mixer.Sound(buffer=np.ascontiguousarray(wave).tobytes())
        logger.info(
            "ToneDevice: mixer ready at %d Hz, %d-bit, %d ch (%.0f Hz beep)",
            freq,
            abs(size),
            channels,
            _TONE_HZ,
        )

    def _shutdown_mixer(self) -> None:
        if self._sound is not None:
            self._sound.stop()
            self._sound = None
        if pygame.mixer.get_init():
            pygame.mixer.quit()
