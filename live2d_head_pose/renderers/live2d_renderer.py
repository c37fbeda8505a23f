"""Live2D v3 model renderer and rig channels."""

from typing import Optional, Tuple, Dict
import logging
import numpy as np
import pygame
import live2d.v3 as live2d

from ..core.base_channel import AvatarChannel

logger = logging.getLogger(__name__)


class Live2DChannel(AvatarChannel):
    """Avatar channel bound to one parameter of a loaded Live2D model."""

    def __init__(self, renderer: "Live2DRenderer", name: str, minimum: float, maximum: float):
        super().__init__(name, minimum, maximum)
        self.renderer = renderer

    def _write(self, value: float) -> None:
        self.renderer.set_parameter(self.name, value)


class Live2DRenderer:
    """
    Wrapper for Live2D v3 model rendering in a pygame OpenGL window.
    """

    def __init__(self,
                 model_path: str,
                 canvas_size: Tuple[int, int] = (512, 512),
                 background_color: Tuple[int, int, int, int] = (0, 0, 0, 0),
                 hidden: bool = False):
        """
        Initialize Live2D renderer.

        Args:
            model_path: Path to .model3.json file
            canvas_size: Rendering canvas size (width, height)
            background_color: RGBA background color
            hidden: Render off-screen instead of showing a window
        """
        self.model_path = model_path
        self.canvas_size = canvas_size
        self.background_color = background_color
        self.hidden = hidden

        self.model: Optional[live2d.LAppModel] = None
        self.initialized = False

        # Latest value per parameter, re-applied on every draw
        self._param_values: Dict[str, float] = {}
        self._param_ranges: Dict[str, Tuple[float, float]] = {}

    def initialize(self):
        """Initialize pygame and Live2D framework."""
        if self.initialized:
            return

        pygame.init()

        flags = pygame.DOUBLEBUF | pygame.OPENGL
        if self.hidden:
            flags |= pygame.HIDDEN
        pygame.display.set_mode(self.canvas_size, flags)
        pygame.display.set_caption("live2d-head-pose")

        live2d.init()
        live2d.glInit()

        self.model = live2d.LAppModel()
        self.model.LoadModelJson(self.model_path)
        self.model.Resize(*self.canvas_size)

        # Head angles come from tracking only
        self.model.SetAutoBlinkEnable(False)
        self.model.SetAutoBreathEnable(False)

        self._param_ranges = self._read_parameter_ranges()
        self.initialized = True
        logger.info("Loaded Live2D model %s (%d parameters)", self.model_path, len(self._param_ranges))

    def _read_parameter_ranges(self) -> Dict[str, Tuple[float, float]]:
        ranges = {}
        for index in range(self.model.GetParameterCount()):
            param = self.model.GetParameter(index)
            ranges[param.id] = (float(param.min), float(param.max))
        return ranges

    def channel(self, name: str) -> Optional[Live2DChannel]:
        """
        Get a rig channel for a model parameter.

        Args:
            name: Live2D parameter id, e.g. "ParamAngleX"

        Returns:
            Channel using the model's parameter range, or None if the model lacks it
        """
        if not self.initialized:
            self.initialize()

        if name not in self._param_ranges:
            logger.warning("Model has no parameter %s, channel disabled", name)
            return None

        minimum, maximum = self._param_ranges[name]
        return Live2DChannel(self, name, minimum, maximum)

    def set_parameter(self, name: str, value: float):
        """Store a parameter value for the next draw."""
        self._param_values[name] = value

    def draw(self) -> bool:
        """
        Render one frame with the current parameter values.

        Returns:
            False once the window has been closed
        """
        if not self.initialized:
            self.initialize()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False

        r, g, b, a = [c / 255.0 for c in self.background_color]
        live2d.clearBuffer(r, g, b, a)

        for name, value in self._param_values.items():
            self.model.SetParameterValue(name, value, 1.0)
        self.model.Update()
        self.model.Draw()

        pygame.display.flip()
        return True

    def read_pixels(self) -> np.ndarray:
        """Read the last rendered frame as a BGR uint8 array (H, W, 3)."""
        import OpenGL.GL as gl

        width, height = self.canvas_size
        pixels = gl.glReadPixels(0, 0, width, height, gl.GL_RGB, gl.GL_UNSIGNED_BYTE)
        pixels_np = np.frombuffer(pixels, dtype=np.uint8).reshape((height, width, 3))

        # Flip vertically (OpenGL convention) and swap R and B
        return np.ascontiguousarray(pixels_np[::-1, :, ::-1])

    def cleanup(self):
        """Clean up resources."""
        if self.initialized:
            live2d.dispose()
            pygame.quit()
            self.initialized = False
            self.model = None
            self._param_values.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
