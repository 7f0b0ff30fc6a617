"""Audible click when the selected panel changes."""

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from queue import Full, Queue
from typing import Optional

import numpy as np
import numpy.typing as npt
import soundfile as sf

from superhat.exceptions import handle_errors
from superhat.models import Panel
from superhat.protocols import Action, PanelSelected

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
CLICK_DURATION = 0.03
CLICK_FREQUENCIES = {Panel.A: 1400.0, Panel.B: 1900.0}

Player = Callable[[npt.NDArray[np.float32], int], None]


def synthesize_click(panel: Panel, sample_rate: int = SAMPLE_RATE) -> npt.NDArray[np.float32]:
    """
    Build a short stereo click panned toward the panel's side.

    Returns:
        float32 array of shape (frames, 2)
    """
    frames = int(sample_rate * CLICK_DURATION)
    t = np.arange(frames, dtype=np.float32) / sample_rate
    envelope = np.exp(-t * 180.0)
    tone = (np.sin(2 * np.pi * CLICK_FREQUENCIES[panel] * t) * envelope).astype(np.float32)

    near, far = (0, 1) if panel is Panel.A else (1, 0)
    stereo = np.zeros((frames, 2), dtype=np.float32)
    stereo[:, near] = tone
    stereo[:, far] = tone * 0.25
    return stereo


def load_click(path: Path) -> tuple[npt.NDArray[np.float32], int]:
    """
    Load a click sound from an audio file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuntimeError: If soundfile cannot decode it
    """
    if not path.exists():
        raise FileNotFoundError(f"Click sound not found: {path}")
    data, sample_rate = sf.read(str(path), dtype="float32")
    if len(data) == 0:
        raise RuntimeError(f"Click sound is empty: {path}")
    return data, sample_rate


def play_with_sounddevice(data: npt.NDArray[np.float32], sample_rate: int) -> None:
    """Play a buffer on the default output device and wait for it to finish."""
    # PortAudio is loaded on first use so machines without it can run silent
    import sounddevice as sd

    sd.play(data, sample_rate)
    sd.wait()


class ClickFeedback:
    """
    Action observer that plays a left or right click on PanelSelected.

    Playback happens on a worker thread so the input loop never waits on
    audio. Requests made while the worker is busy with earlier clicks are
    dropped. Playback failures are logged and never raised.
    """

    def __init__(
        self,
        enabled: bool = True,
        volume: float = 0.5,
        left_path: Optional[Path] = None,
        right_path: Optional[Path] = None,
        player: Optional[Player] = None,
    ):
        """
        Args:
            enabled: Whether clicks are played
            volume: Gain applied to the click (0.0-1.0)
            left_path: Audio file for panel A (None = synthesized click)
            right_path: Audio file for panel B (None = synthesized click)
            player: Plays a (frames, channels) buffer. Defaults to sounddevice.
        """
        self._enabled = enabled
        self._volume = volume
        self._player = player or play_with_sounddevice
        self._sounds = {
            Panel.A: self._load(Panel.A, left_path),
            Panel.B: self._load(Panel.B, right_path),
        }
        self._queue: Queue[Panel | None] = Queue(maxsize=2)
        self._worker: Optional[threading.Thread] = None
        self._worker_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value
        logger.info(f"Click sounds {'enabled' if value else 'disabled'}")

    def _load(self, panel: Panel, path: Optional[Path]) -> tuple[npt.NDArray[np.float32], int]:
        if path is not None:
            try:
                return load_click(path)
            except (OSError, RuntimeError, sf.LibsndfileError) as e:
                logger.warning(f"Could not load click sound {path}, using built-in click: {e}")
        return synthesize_click(panel), SAMPLE_RATE

    def on_action(self, action: Action) -> None:
        if not isinstance(action, PanelSelected) or not self._enabled:
            return
        self._ensure_worker()
        try:
            self._queue.put_nowait(action.panel)
        except Full:
            logger.debug(f"Click for {action.panel.display_name} dropped, player busy")

    @handle_errors(operation_name="play click", re_raise=False, log_level=logging.WARNING)
    def play(self, panel: Panel) -> None:
        """Play the click for a panel on the calling thread."""
        data, sample_rate = self._sounds[panel]
        self._player(data * self._volume, sample_rate)

    def _ensure_worker(self) -> None:
        with self._worker_lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._run_worker, name="superhat-click", daemon=True
                )
                self._worker.start()

    def _run_worker(self) -> None:
        while True:
            panel = self._queue.get()
            if panel is None:
                return
            self.play(panel)

    def close(self, timeout: float = 1.0) -> None:
        """Let queued clicks finish, then stop the worker."""
        with self._worker_lock:
            worker = self._worker
            self._worker = None
        if worker is None or not worker.is_alive():
            return
        try:
            self._queue.put(None, timeout=timeout)
        except Full:
            logger.warning("Click player did not drain in time")
            return
        worker.join(timeout=timeout)
