import numpy as np
import pygame
import pytest

from protimer import sound
from protimer.sound import SoundManager, sawtooth_sweep, synthesize, to_pcm

RATE = 8000


class TestSynthesis:
    @pytest.mark.parametrize("kind,seconds,gain", [
        ("beep", 0.3, 0.1),
        ("beep2", 0.25, 0.05),
        ("alarm", 0.6, 0.1),
    ])
    def test_length_and_gain(self, kind, seconds, gain):
        wave = synthesize(kind, RATE)
        assert len(wave) == int(seconds * RATE)
        assert np.max(np.abs(wave)) <= gain + 1e-9
        assert np.max(np.abs(wave)) > gain * 0.9

    def test_beep2_has_silent_gap(self):
        wave = synthesize("beep2", RATE)
        gap = wave[int(0.1 * RATE):int(0.15 * RATE)]
        assert np.all(gap == 0)

    def test_starts_and_ends_silent(self):
        wave = synthesize("beep", RATE)
        assert wave[0] == 0
        assert abs(wave[-1]) < 1e-3

    def test_sweep_falls_in_pitch(self):
        wave = sawtooth_sweep(600, 100, 0.6, RATE)
        # a falling sawtooth wraps (big negative jump) less often towards the end
        wraps = np.diff(wave) < -1.0
        half = len(wraps) // 2
        assert wraps[:half].sum() > wraps[half:].sum()

    @pytest.mark.parametrize("kind", ["none", "siren"])
    def test_unknown_kind(self, kind):
        with pytest.raises(ValueError):
            synthesize(kind, RATE)


def test_to_pcm_stereo():
    pcm = to_pcm(np.array([0.0, 1.0, -1.0, 2.0]))
    assert pcm.dtype == np.int16
    assert pcm.shape == (4, 2)
    assert list(pcm[:, 0]) == [0, 32767, -32767, 32767]


def test_to_pcm_mono():
    assert to_pcm(np.zeros(3), channels=1).shape == (3,)


class TestSoundManagerWithoutDevice:
    @pytest.fixture
    def manager(self, monkeypatch):
        def no_device(*args, **kwargs):
            raise pygame.error("No available audio device")
        monkeypatch.setattr(sound.pygame.mixer, "init", no_device)
        return SoundManager()

    def test_disabled(self, manager):
        assert manager.available is False
        assert manager.sounds == {}

    def test_play_is_silent_noop(self, manager):
        manager.play("beep")
        manager.stop()
        manager.close()

    def test_none_is_rejected(self, manager):
        with pytest.raises(ValueError):
            manager.play("none")
