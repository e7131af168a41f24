import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import RenderSettings
from .encoder import save_png
from .fonts import set_fonts_dir
from .geometry import Size
from .scenes import AD_SIZE, LAYOUTS, Layout


logger = logging.getLogger(__name__)


class AdPipeline:
    """
    Renders the registered ad layouts strictly one after another:
    - for each selected layout:
        * paint the scene on its own fresh canvas
        * encode as PNG with gamma metadata
        * write to {output_root}/{layout filename}
    """

    def __init__(
        self,
        output_root: Path,
        size: Size = AD_SIZE,
        layouts: Optional[Dict[str, Layout]] = None,
    ) -> None:
        self.output_root = Path(output_root)
        self.size = size
        self.layouts = layouts if layouts is not None else LAYOUTS

    @classmethod
    def from_settings(cls, settings: RenderSettings) -> "AdPipeline":
        if settings.fonts_dir is not None:
            set_fonts_dir(settings.fonts_dir)
        return cls(
            output_root=settings.output_root,
            size=Size(settings.width, settings.height),
        )

    def select(self, names: Optional[Sequence[str]] = None) -> List[Layout]:
        if not names:
            return list(self.layouts.values())
        unknown = [n for n in names if n not in self.layouts]
        if unknown:
            raise ValueError(f"Unknown layout(s): {', '.join(unknown)}")
        return [self.layouts[n] for n in names]

    def render_one(self, layout: Layout) -> Path:
        logger.info("rendering %s at %dx%d", layout.name, self.size.width, self.size.height)
        image = layout.render(self.size)
        return save_png(image, self.output_root / layout.filename).resolve()

    def run(self, names: Optional[Sequence[str]] = None) -> List[Path]:
        """
        Render and write each selected layout. Returns the absolute paths
        written, in order. Any write failure propagates as ImageWriteError.
        """
        return [self.render_one(layout) for layout in self.select(names)]
