"""
Alert tones: synthesized with numpy, played through pygame.mixer.
"""

import numpy as np
import pygame

from protimer.config import SOUND_KINDS, SOUND_NONE
from protimer.logging_config import get_logger

log = get_logger(__name__)

SAMPLE_RATE = 44100

# ===================== SYNTHESIS =====================

def _fade(wave, sample_rate, seconds=0.01):
    """Short linear fade in/out so tones start and stop without a click."""
    n = min(int(sample_rate * seconds), len(wave) // 2)
    if n > 0:
        wave[:n] *= np.linspace(0, 1, n)
        wave[-n:] *= np.linspace(1, 0, n)
    return wave


def _times(duration, sample_rate):
    n = int(duration * sample_rate)
    return np.linspace(0, duration, n, False)


def sine(freq, duration, sample_rate=SAMPLE_RATE):
    t = _times(duration, sample_rate)
    return np.sin(freq * t * 2 * np.pi)


def square(freq, duration, sample_rate=SAMPLE_RATE):
    return np.sign(sine(freq, duration, sample_rate))


def sawtooth_sweep(f_start, f_end, duration, sample_rate=SAMPLE_RATE):
    """Sawtooth whose pitch falls (or rises) exponentially from f_start to f_end."""
    t = _times(duration, sample_rate)
    ratio = f_end / f_start
    # integral of f_start * ratio**(t/duration)
    cycles = f_start * duration * (ratio ** (t / duration) - 1) / np.log(ratio)
    return 2.0 * (cycles - np.floor(cycles)) - 1.0


def synthesize(kind, sample_rate=SAMPLE_RATE):
    """Mono float waveform for an alert kind, already scaled by its gain."""
    if kind == "beep":
        wave = 0.1 * _fade(sine(800, 0.3, sample_rate), sample_rate)
    elif kind == "beep2":
        blip = 0.05 * _fade(square(1200, 0.1, sample_rate), sample_rate)
        gap = np.zeros(int(0.05 * sample_rate))
        wave = np.concatenate([blip, gap, blip])
    elif kind == "alarm":
        wave = 0.1 * _fade(sawtooth_sweep(600, 100, 0.6, sample_rate), sample_rate)
    else:
        raise ValueError(f"No tone for alert kind {kind!r}")
    return wave


def to_pcm(wave, channels=2):
    """Float wave in [-1, 1] -> int16 frames shaped (n, channels)."""
    audio = (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)
    if channels == 1:
        return audio
    return np.repeat(audio.reshape(len(audio), 1), channels, axis=1)


# ===================== PLAYBACK =====================

class SoundManager:
    """
    The alert dispatcher handed to the tick scheduler.

    play() is fire-and-forget: pygame mixes overlapping tones on free
    channels. Without an audio device the manager stays silent and logs it.
    """

    def __init__(self, sample_rate=SAMPLE_RATE):
        self.sample_rate = sample_rate
        self.sounds = {}
        self.available = False
        try:
            pygame.mixer.init(frequency=sample_rate, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            log.warning("Sound disabled, mixer unavailable: %s", e)
            return
        self.available = True
        self._generate_sounds()

    def _generate_sounds(self):
        _, _, channels = pygame.mixer.get_init()
        for kind in SOUND_KINDS:
            if kind == SOUND_NONE:
                continue
            pcm = to_pcm(synthesize(kind, self.sample_rate), channels)
            self.sounds[kind] = pygame.sndarray.make_sound(np.ascontiguousarray(pcm))

    def play(self, kind):
        if kind not in SOUND_KINDS or kind == SOUND_NONE:
            raise ValueError(f"Cannot play alert kind {kind!r}")
        if not self.available:
            log.info("Alert %r (sound unavailable)", kind)
            return
        log.info("Playing alert %r", kind)
        self.sounds[kind].play()

    def stop(self):
        if self.available:
            pygame.mixer.stop()

    def close(self):
        if self.available:
            pygame.mixer.quit()
            self.available = False
