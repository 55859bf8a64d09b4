"""
Main application module for the Mandelbrot explorer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- User input (drag-box zoom, keyboard)
- Drawing the published grid and the drag box
- Handing zoom requests to the ZoomNavigator
"""

import logging

import pygame

from .compute import warmup_jit
from .config import load_settings, window_from_settings
from .field import FractalField
from .zoom import ZoomNavigator


logger = logging.getLogger(__name__)


class MandelbrotApp:
    """
    Main application class for the Mandelbrot explorer.

    Handles the pygame window and event loop; all fractal state lives in
    the FractalField and the ZoomNavigator.
    """

    DRAG_BOX_COLOR = (255, 255, 255)
    BACKGROUND = (0, 0, 0)
    TITLE = "Mandelbrot Set - Drag to zoom, Backspace to go back, R to reset"

    def __init__(self, settings):
        """
        Initialize the application.

        Args:
            settings: dict as returned by config.load_settings
        """
        self.width = settings['width']
        self.height = settings['height']

        self.field = FractalField(
            self.width, self.height, settings['max_iter'],
            escape_radius=settings['escape_radius'],
            parallel=settings['parallel'],
            num_threads=settings['num_threads'],
            chunk_size=settings['chunk_size'],
        )
        self.navigator = ZoomNavigator(self.field, window_from_settings(settings))

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Display state
        self.current_surface = None
        self.surface_generation = -1

        # Input state
        self.drag_start = None
        self.drag_pos = None

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            self._handle_events()
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()

    def _warmup_and_initial_render(self):
        """Warm up JIT and do initial render."""
        self.screen.fill(self.BACKGROUND)
        pygame.display.flip()
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit(self.field.colormap)
        self._with_busy_caption(self.navigator.render)

    def _with_busy_caption(self, action, *args):
        pygame.display.set_caption("Computing...")
        try:
            return action(*args)
        finally:
            pygame.display.set_caption(self.TITLE)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.drag_start = event.pos
                self.drag_pos = event.pos
            elif event.type == pygame.MOUSEMOTION:
                if self.drag_start is not None:
                    self.drag_pos = event.pos
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._handle_drag_end(event.pos)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_drag_end(self, pos):
        """Zoom into the dragged box, if one was started."""
        start = self.drag_start
        self.drag_start = None
        self.drag_pos = None
        if start is not None:
            self._with_busy_caption(self.navigator.zoom, start, pos)

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_r:
            self._with_busy_caption(self.navigator.reset)
        elif event.key == pygame.K_BACKSPACE:
            self._with_busy_caption(self.navigator.back)

    def _draw(self):
        """Draw the current frame."""
        grid, _, _, generation = self.field.snapshot()
        if generation != self.surface_generation:
            # surfarray wants (x, y) indexing
            self.current_surface = pygame.surfarray.make_surface(grid.swapaxes(0, 1))
            self.surface_generation = generation

        self.screen.fill(self.BACKGROUND)
        self.screen.blit(self.current_surface, (0, 0))
        if self.drag_start is not None:
            self._draw_drag_box(self.drag_start, self.drag_pos)
        pygame.display.flip()

    def _draw_drag_box(self, a, b):
        corners = [a, (a[0], b[1]), b, (b[0], a[1])]
        pygame.draw.lines(self.screen, self.DRAG_BOX_COLOR, True, corners)


def run(width=None, height=None, max_iter=None, settings_path=None):
    """
    Run the Mandelbrot explorer.

    Args:
        width: Window width (default from settings, 800)
        height: Window height (default from settings, 800)
        max_iter: Maximum iterations (default from settings, 256)
        settings_path: JSON settings file (default: package settings.json)
    """
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s: %(message)s")
    settings = load_settings(settings_path)
    for key, value in (('width', width), ('height', height), ('max_iter', max_iter)):
        if value is not None:
            settings[key] = value

    app = MandelbrotApp(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
