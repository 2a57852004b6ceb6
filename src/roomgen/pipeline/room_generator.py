"""
Room generator: owns a grid and turns it into room geometry and lights.

Ties the pieces together the way a front-end drives them:
edit cells or run a layout generator, then generate the room (mesh groups,
validation and ceiling lights) from the current grid.
"""

import copy
import logging
from typing import Optional, Union

import numpy as np

from roomgen.config import RoomGeneratorSettings, clamp_grid_size
from roomgen.conversion import (
    LightHost,
    LightsPlacer,
    ReferenceFrame,
    RoomMesh,
    RoomMeshBuilder,
)
from roomgen.generators import (
    GeneratorType,
    create_layout_generator,
    parse_generator_type,
)
from roomgen.grid import GridData, WallSide
from roomgen.validation import validate_grid, validate_mesh

logger = logging.getLogger(__name__)


class RoomGenerator:
    """
    Grid editing, layout generation and room building in one place.

    The generator works on its own copy of the settings passed in; change
    them afterwards through the ``settings`` attribute.
    """

    def __init__(
        self,
        settings: Optional[RoomGeneratorSettings] = None,
        light_host: Optional[LightHost] = None,
        frame: Optional[ReferenceFrame] = None,
    ):
        self.settings = copy.deepcopy(settings) if settings is not None else RoomGeneratorSettings()
        self.settings.grid_width = clamp_grid_size(self.settings.grid_width)
        self.settings.grid_height = clamp_grid_size(self.settings.grid_height)

        self.grid = GridData(self.settings.grid_width, self.settings.grid_height)
        self.frame = frame or ReferenceFrame.identity()
        self.lights = LightsPlacer(light_host) if light_host is not None else LightsPlacer()
        self.mesh: Optional[RoomMesh] = None

    # ------------------------------------------------------------------
    # Cell editing
    # ------------------------------------------------------------------

    def set_cell_height(self, x: int, y: int, height: float) -> None:
        self.grid.set_cell_height(x, y, height)

    def get_cell_height(self, x: int, y: int) -> float:
        return self.grid.get_cell_height(x, y)

    def toggle_cell(self, x: int, y: int) -> None:
        """Switch a cell between empty and the default height."""
        if not self.grid.in_bounds(x, y):
            return
        current = self.grid.get_cell_height(x, y)
        self.grid.set_cell_height(x, y, 0.0 if current > 0 else self.settings.default_height)

    def get_cell_wall(self, x: int, y: int, side: WallSide) -> bool:
        return self.grid.get_cell_wall(x, y, side)

    def set_cell_wall(self, x: int, y: int, side: WallSide, enabled: bool) -> None:
        self.grid.set_cell_wall(x, y, side, enabled)

    def toggle_cell_wall(self, x: int, y: int, side: WallSide) -> None:
        self.grid.toggle_cell_wall(x, y, side)

    def clear_grid(self) -> None:
        self.grid.clear()

    def fill_grid(self) -> None:
        """Raise every cell to the default height."""
        self.grid.heights.fill(self.settings.default_height)

    # ------------------------------------------------------------------
    # Grid shape and interchange
    # ------------------------------------------------------------------

    def resize_grid(self, width: int, height: int) -> None:
        """
        Resize the grid, clamped to [MIN_GRID_SIZE, MAX_GRID_SIZE].

        Occupied cells are never dropped, so the realized size can exceed
        the request.
        """
        realized = self.grid.resize(clamp_grid_size(width), clamp_grid_size(height))
        self.settings.grid_width, self.settings.grid_height = realized

    def load_grid_from_array(self, heights: np.ndarray) -> None:
        """
        Load a 2D height array indexed [x, y].

        The grid is resized to the array's shape like resize_grid (clamped,
        never dropping occupied cells), then the overlapping area is
        overwritten with the array values.

        Raises:
            ValueError: If the array is not two-dimensional
        """
        data = np.asarray(heights, dtype=np.float32)
        if data.ndim != 2:
            raise ValueError(f"Height grid must be 2D, got shape {data.shape}")

        self.resize_grid(*data.shape)
        width = min(data.shape[0], self.grid.width)
        height = min(data.shape[1], self.grid.height)
        self.grid.heights[:width, :height] = data[:width, :height]

    def export_grid_to_array(self) -> np.ndarray:
        return self.grid.to_height_array()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate_layout(self, generator_type: Union[GeneratorType, str, None] = None) -> np.ndarray:
        """
        Run a layout generator over the current grid size and load the result.

        Args:
            generator_type: Generator to run (defaults to the configured one)

        Returns:
            The generated height array

        Raises:
            ValueError: If generator_type names no known generator
        """
        if generator_type is None:
            generator_type = self.settings.generator_type
        generator_type = parse_generator_type(generator_type)

        generator_settings = self.settings.generator_settings(generator_type)
        # Generated floors use the same height as hand-placed cells
        generator_settings.height = self.settings.default_height
        generator = create_layout_generator(generator_settings)
        layout = generator.generate(self.grid.width, self.grid.height)
        self.load_grid_from_array(layout)

        logger.info(
            "Generated %s layout %dx%d (seed %d): %d floor cells",
            generator_type.value, self.grid.width, self.grid.height,
            generator_settings.seed, int(np.count_nonzero(layout > 0)),
        )
        return layout

    def generate_room(self) -> RoomMesh:
        """
        Build the room mesh groups from the current grid.

        Validation problems are logged, not raised. Lights are placed when
        automatic lighting is enabled and cleared otherwise.
        """
        grid_result = validate_grid(self.grid)
        for issue in grid_result.warnings:
            logger.warning("%s", issue)

        self.mesh = RoomMeshBuilder(self.grid, self.settings.mesh).build()

        mesh_result = validate_mesh(self.mesh)
        if not mesh_result.passed or mesh_result.warnings:
            logger.warning("Room mesh validation:\n%s", mesh_result.report())

        if self.settings.automatically_add_lights:
            self.lights.add_ceiling_lights(self.grid, self.settings.lights, self.frame)
        else:
            self.lights.clear()

        logger.info(
            "Generated room: %d triangles in %d groups, %d lights",
            self.mesh.total_triangles, len(self.mesh.groups), self.lights.light_count,
        )
        return self.mesh

    def create_simple_room(self) -> RoomMesh:
        """Clear the grid, raise a one-cell ring around its edge and build it."""
        self.clear_grid()
        width, height = self.grid.shape
        ring = self.grid.heights
        ring[0, :] = self.settings.default_height
        ring[width - 1, :] = self.settings.default_height
        ring[:, 0] = self.settings.default_height
        ring[:, height - 1] = self.settings.default_height
        return self.generate_room()
