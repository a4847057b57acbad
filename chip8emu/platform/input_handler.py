"""
Input handler for chip8emu.
Maps keyboard keys to the 16-key CHIP-8 keypad.

Keyboard layout
---------------

The left-hand block of a QWERTY keyboard stands in for the keypad::

    Keyboard      CHIP-8
    1 2 3 4       1 2 3 C
    Q W E R       4 5 6 D
    A S D F       7 8 9 E
    Z X C V       A 0 B F

===================  ==============================
Key                  Action
===================  ==============================
Escape               Quit
P                    Pause / resume
F1                   Reset and reload the ROM
===================  ==============================
"""

from __future__ import annotations

import logging

import pygame

from chip8emu.core.machine import Chip8Machine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Keyboard -> keypad index
# ---------------------------------------------------------------------------

KEY_MAP: dict[int, int] = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

_PAUSE_KEY: int = pygame.K_p
_RESET_KEY: int = pygame.K_F1


class InputHandler:
    """Translates pygame keyboard events into keypad edges on a machine.

    Parameters
    ----------
    machine:
        The machine whose :meth:`~Chip8Machine.set_key` receives the edges.
    """

    def __init__(self, machine: Chip8Machine) -> None:
        self._machine = machine
        self._quit_requested: bool = False
        self._pause_toggled: bool = False
        self._reset_requested: bool = False

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def machine(self) -> Chip8Machine:
        return self._machine

    @property
    def quit_requested(self) -> bool:
        """``True`` if the user pressed Escape or closed the window."""
        return self._quit_requested

    def take_pause_toggle(self) -> bool:
        """Return ``True`` once for each press of the pause key."""
        toggled = self._pause_toggled
        self._pause_toggled = False
        return toggled

    def take_reset_request(self) -> bool:
        """Return ``True`` once for each press of the reset key."""
        requested = self._reset_requested
        self._reset_requested = False
        return requested

    def poll(self) -> None:
        """Pump the pygame event queue and process all pending events.

        This should be called once at the top of each frame.
        """
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
            return

        if event.type == pygame.KEYDOWN:
            self._on_key_down(event)
        elif event.type == pygame.KEYUP:
            self._on_key_up(event)
        elif event.type == pygame.WINDOWFOCUSLOST:
            # Key-up events are lost while unfocused; never leave a key stuck.
            self.clear_all()

    def clear_all(self) -> None:
        """Release all keypad keys."""
        self._machine.release_all_keys()

    # ------------------------------------------------------------------
    # Keyboard handlers
    # ------------------------------------------------------------------

    def _on_key_down(self, event: pygame.event.Event) -> None:
        key = event.key

        if key == pygame.K_ESCAPE:
            self._quit_requested = True
            return
        if key == _PAUSE_KEY:
            self._pause_toggled = True
            return
        if key == _RESET_KEY:
            self._reset_requested = True
            return

        index = KEY_MAP.get(key)
        if index is not None:
            self._machine.set_key(index, True)

    def _on_key_up(self, event: pygame.event.Event) -> None:
        index = KEY_MAP.get(event.key)
        if index is not None:
            self._machine.set_key(index, False)
