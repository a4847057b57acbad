"""
Main application window for chip8emu.
Uses pygame to create a display, drive the emulation main loop, and
coordinate audio, video, and input subsystems.

Typical usage::

    from chip8emu.platform.window import Window

    window = Window("pong.ch8", scale=10)
    window.run()
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import pygame

from chip8emu.core.errors import RomLoadError
from chip8emu.core.machine import Chip8Machine
from chip8emu.core.types import DEFAULT_CPU_HZ, TIMER_HZ, Fault
from chip8emu.platform.audio import ToneDevice
from chip8emu.platform.input_handler import InputHandler
from chip8emu.shell.frame_renderer import FrameRenderer
from chip8emu.shell.services.machine_factory import MachineFactory

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE: str = "chip8emu"

# Minimum / maximum allowed display scale factors.
_MIN_SCALE: int = 1
_MAX_SCALE: int = 20


class Window:
    """Pygame window that owns the emulation main loop.

    The loop runs at 60 Hz.  Each iteration executes ``cpu_hz / 60``
    instructions and, unless *legacy_timing* is set, ticks the timers once,
    so timer speed does not depend on instruction throughput.

    Parameters
    ----------
    rom_path:
        ROM to load (and to reload on reset).
    scale:
        Integer scale factor applied to the 64x32 native resolution.
    cpu_hz:
        Instructions executed per second.
    legacy_timing:
        Tick the timers on every instruction instead of at 60 Hz.
    enable_audio:
        Set to ``False`` to mute the beep.
    beep_path:
        Optional WAV file for the beep.
    """

    def __init__(
        self,
        rom_path: str,
        scale: int = 10,
        *,
        cpu_hz: int = DEFAULT_CPU_HZ,
        legacy_timing: bool = False,
        enable_audio: bool = True,
        beep_path: Optional[str] = None,
    ) -> None:
        # ---- basic state -------------------------------------------------
        self._rom_path: str = rom_path
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._cycles_per_frame: int = max(1, cpu_hz // TIMER_HZ)
        self._running: bool = False
        self._paused: bool = False

        # ---- machine first: a bad ROM raises before pygame is touched -----
        self._machine: Chip8Machine = MachineFactory.create(
            rom_path,
            tick_timers_on_step=legacy_timing,
            on_fault=self._on_fault,
        )

        # ---- audio -------------------------------------------------------
        if not pygame.get_init():
            pygame.init()
        self._audio: ToneDevice = ToneDevice(enabled=enable_audio, wav_path=beep_path)
        self._machine.on_tone = self._audio.play_tone

        # ---- init pygame display -----------------------------------------
        self._renderer: FrameRenderer = FrameRenderer()
        self._display_width: int = self._renderer.width * self._scale
        self._display_height: int = self._renderer.height * self._scale
        self._screen: pygame.Surface = pygame.display.set_mode(
            (self._display_width, self._display_height)
        )
        pygame.display.set_caption(self._build_title())
        self._clock: pygame.time.Clock = pygame.time.Clock()

        self._input: InputHandler = InputHandler(self._machine)

        # ---- performance counters ----------------------------------------
        self._frame_count: int = 0
        self._fps_update_time: float = 0.0
        self._fps_display: float = 0.0

        logger.info(
            "Window: %dx%d display (scale=%d, %d instructions/frame, %s timers)",
            self._display_width,
            self._display_height,
            self._scale,
            self._cycles_per_frame,
            "per-step" if legacy_timing else "60 Hz",
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def machine(self) -> Chip8Machine:
        return self._machine

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        self._paused = value
        pygame.display.set_caption(self._build_title())

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Enter the main emulation loop.

        This method blocks until the user closes the window or presses
        Escape.  Each iteration:

        1. Polls input events and forwards key edges to the machine.
        2. Runs one frame's worth of instructions (and timer tick).
        3. Redraws the display if the framebuffer is dirty.
        4. Throttles to 60 Hz.
        """
        self._running = True
        self._fps_update_time = time.monotonic()
        self._frame_count = 0
        self._present(self._machine.consume_dirty_frame())

        logger.info("Entering main loop")

        try:
            while self._running:
                self._tick()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self._shutdown()

    def _tick(self) -> None:
        """Execute one iteration of the main loop."""
        # ---- input -------------------------------------------------------
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return
        if self._input.take_pause_toggle():
            self.paused = not self._paused
        if self._input.take_reset_request():
            try:
                MachineFactory.reload(self._machine, self._rom_path)
            except (OSError, RomLoadError) as exc:
                logger.error("Reset failed, keeping current state: %s", exc)
            else:
                pygame.display.set_caption(self._build_title())

        # ---- emulation ---------------------------------------------------
        if not self._paused:
            self._machine.run_frame(self._cycles_per_frame)

        # ---- video -------------------------------------------------------
        if self._machine.dirty:
            self._present(self._machine.consume_dirty_frame())

        # ---- timing ------------------------------------------------------
        self._clock.tick(TIMER_HZ)
        self._update_fps()

    def _present(self, pixels: bytes) -> None:
        surface = self._renderer.render(pixels)
        scaled = pygame.transform.scale(surface, self._screen.get_size())
        self._screen.blit(scaled, (0, 0))
        pygame.display.flip()

    # ------------------------------------------------------------------
    # Fault / FPS tracking
    # ------------------------------------------------------------------

    def _on_fault(self, fault: Fault) -> None:
        if fault.kind.fatal:
            pygame.display.set_caption(f"{_WINDOW_TITLE}  [halted: {fault.kind.name}]")

    def _update_fps(self) -> None:
        """Update the displayed FPS counter roughly once per second."""
        self._frame_count += 1
        now = time.monotonic()
        elapsed = now - self._fps_update_time
        if elapsed >= 1.0:
            self._fps_display = self._frame_count / elapsed
            self._frame_count = 0
            self._fps_update_time = now
            if not self._machine.halted:
                pygame.display.set_caption(
                    f"{self._build_title()}  [{self._fps_display:.1f} fps]"
                )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _shutdown(self) -> None:
        """Clean up all subsystems."""
        logger.info("Shutting down")
        self._audio.shutdown()
        pygame.quit()

    def _build_title(self) -> str:
        title = _WINDOW_TITLE
        if self._paused:
            title += "  [paused]"
        return title
