import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv


DEFAULT_OUTPUT_ROOT = Path("marketing/ads")
DEFAULT_WIDTH = 1600
DEFAULT_HEIGHT = 1200


@dataclass
class RenderSettings:
    output_root: Path = DEFAULT_OUTPUT_ROOT
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fonts_dir: Optional[Path] = None
    # Empty means every registered layout.
    layouts: List[str] = field(default_factory=list)


def _int_or_default(raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        return default


def load_settings(env: Optional[Mapping[str, str]] = None) -> RenderSettings:
    """
    Build settings from the environment. When `env` is not given, a local
    .env file is loaded first and os.environ is used.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    output_root = env.get("ADRENDER_OUTPUT_ROOT")
    fonts_dir = env.get("ADRENDER_FONTS_DIR")
    return RenderSettings(
        output_root=Path(output_root) if output_root else DEFAULT_OUTPUT_ROOT,
        width=_int_or_default(env.get("ADRENDER_WIDTH"), DEFAULT_WIDTH),
        height=_int_or_default(env.get("ADRENDER_HEIGHT"), DEFAULT_HEIGHT),
        fonts_dir=Path(fonts_dir) if fonts_dir else None,
    )
