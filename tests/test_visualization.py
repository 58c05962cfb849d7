"""Tests for the Pygame surface adapter, drawn off-screen."""
import pygame
import pytest

from visualization import PygameSurface, to_pygame_rgba


@pytest.fixture
def target():
    surf = pygame.Surface((40, 30), 0, 32)
    surf.fill((0, 0, 0))
    return surf


class TestColorConversion:
    def test_opaque(self):
        assert to_pygame_rgba((255, 128, 0, 1.0)) == (255, 128, 0, 255)

    def test_overlay_alpha(self):
        assert to_pygame_rgba((0, 0, 5, 0.1)) == (0, 0, 5, 26)

    def test_alpha_is_clamped(self):
        assert to_pygame_rgba((1, 2, 3, 1.5))[3] == 255
        assert to_pygame_rgba((1, 2, 3, -0.2))[3] == 0


class TestPygameSurface:
    def test_size_tracks_target(self, target):
        surface = PygameSurface(target)
        assert (surface.width, surface.height) == (40, 30)
        surface.target = pygame.Surface((10, 20), 0, 32)
        assert (surface.width, surface.height) == (10, 20)

    def test_overlay_darkens(self, target):
        target.fill((255, 255, 255))
        surface = PygameSurface(target)
        surface.fill_rect(0, 0, 40, 30, (0, 0, 5, 0.1))
        r, g, b, _ = target.get_at((20, 15))
        assert 200 < r < 255
        assert r == g

    def test_overlay_repeated_fades_toward_black(self, target):
        target.fill((255, 255, 255))
        surface = PygameSurface(target)
        for _ in range(60):
            surface.fill_rect(0, 0, 40, 30, (0, 0, 5, 0.1))
        assert target.get_at((5, 5)).r < 20

    def test_empty_rect_is_ignored(self, target):
        surface = PygameSurface(target)
        surface.fill_rect(0, 0, 0, 30, (255, 255, 255, 1.0))
        assert target.get_at((0, 0)).r == 0

    def test_opaque_circle(self, target):
        surface = PygameSurface(target)
        surface.fill_circle(20, 15, 2.0, (255, 0, 0, 1.0))
        color = target.get_at((20, 15))
        assert (color.r, color.g, color.b) == (255, 0, 0)
        assert target.get_at((30, 5)).r == 0

    def test_translucent_circle(self, target):
        surface = PygameSurface(target)
        surface.fill_circle(20, 15, 2.0, (255, 0, 0, 0.5))
        assert 100 < target.get_at((20, 15)).r < 160

    def test_invisible_circle_draws_nothing(self, target):
        surface = PygameSurface(target)
        surface.fill_circle(20, 15, 2.0, (255, 255, 255, 0.0))
        assert target.get_at((20, 15)).r == 0

    def test_tiny_radius_still_visible(self, target):
        surface = PygameSurface(target)
        surface.fill_circle(20, 15, 0.5, (255, 255, 255, 1.0))
        assert target.get_at((20, 15)).r == 255

    def test_stamps_are_cached(self, target):
        surface = PygameSurface(target)
        surface.fill_circle(10, 10, 1.5, (255, 255, 255, 0.7))
        surface.fill_circle(30, 20, 1.5, (255, 255, 255, 0.3))
        assert len(surface._stamps) == 1


class RecordingSimulation:
    """Stands in for Simulation and records the host's callbacks."""
    def __init__(self):
        self.events = []

    def on_pointer_move(self, x, y):
        self.events.append(("move", x, y))

    def on_pointer_leave(self):
        self.events.append(("leave",))

    def on_resize(self, width, height):
        self.events.append(("resize", width, height))


@pytest.fixture
def host():
    from visualization import PygameHost
    host = PygameHost(fullscreen=False)
    pygame.event.clear()
    yield host
    host.close()


def post(event_type, **attributes):
    pygame.event.post(pygame.event.Event(event_type, **attributes))


class TestPygameHostEvents:
    def test_opens_window_surface(self, host):
        assert (host.surface.width, host.surface.height) == (1280, 720)

    def test_pointer_events_are_forwarded(self, host):
        sim = RecordingSimulation()
        host.attach(sim)
        post(pygame.MOUSEMOTION, pos=(120, 80), rel=(1, 1), buttons=(0, 0, 0))
        post(pygame.MOUSEMOTION, pos=(121, 82), rel=(1, 2), buttons=(0, 0, 0))
        post(pygame.WINDOWLEAVE)
        assert host.handle_events() is True
        assert sim.events == [("move", 120, 80), ("move", 121, 82), ("leave",)]

    def test_resize_reseeds_once_per_size(self, host):
        sim = RecordingSimulation()
        host.attach(sim)
        post(pygame.VIDEORESIZE, w=640, h=480, size=(640, 480))
        post(pygame.WINDOWSIZECHANGED, x=640, y=480)
        post(pygame.WINDOWSIZECHANGED, x=1280, y=720)
        assert host.handle_events() is True
        assert sim.events == [("resize", 640, 480), ("resize", 1280, 720)]

    def test_unchanged_size_is_ignored(self, host):
        sim = RecordingSimulation()
        host.attach(sim)
        post(pygame.VIDEORESIZE, w=1280, h=720, size=(1280, 720))
        host.handle_events()
        assert sim.events == []

    def test_events_before_attach_are_dropped(self, host):
        post(pygame.MOUSEMOTION, pos=(5, 5), rel=(0, 0), buttons=(0, 0, 0))
        assert host.handle_events() is True

    def test_quit(self, host):
        post(pygame.QUIT)
        assert host.handle_events() is False

    def test_escape(self, host):
        post(pygame.KEYDOWN, key=pygame.K_ESCAPE, mod=0, unicode="\x1b", scancode=41)
        assert host.handle_events() is False

    def test_other_keys_keep_running(self, host):
        post(pygame.KEYDOWN, key=pygame.K_SPACE, mod=0, unicode=" ", scancode=44)
        assert host.handle_events() is True


class TestPygameHostRun:
    def _loop(self, host, **kwargs):
        from simulation import RenderLoop, Simulation
        sim = Simulation(host.surface, seed=3)
        host.attach(sim)
        return RenderLoop(sim, scheduler=host, **kwargs)

    def test_runs_until_max_frames(self, host):
        loop = self._loop(host, max_frames=3)
        host.run(loop)
        assert loop.frame == 3
        assert not loop.running

    def test_quit_stops_loop(self, host):
        loop = self._loop(host)
        post(pygame.QUIT)
        host.run(loop)
        assert loop.frame == 0
        assert not loop.running

    def test_pointer_reaches_simulation(self, host):
        loop = self._loop(host, max_frames=1)
        post(pygame.MOUSEMOTION, pos=(300, 200), rel=(1, 1), buttons=(0, 0, 0))
        host.run(loop)
        assert loop.simulation.pointer.position == (300, 200)
        post(pygame.WINDOWLEAVE)
        host.handle_events()
        assert loop.simulation.pointer.snapshot() == (None, False)
