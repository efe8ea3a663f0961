"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(root="site", layout_dir="layouts", debug=True)

    Template lookup searches ``root/view_dir/<view_root>/<name>`` for views
    and ``root/layout_dir/<layout_root>/<name>`` for layouts. ``root``,
    ``view_dir`` and ``layout_dir`` may each be a tuple of alternatives.
    """

    # Templates
    root: str | Path | tuple[str | Path, ...] = "."
    view_dir: str | tuple[str, ...] = "view"
    layout_dir: str | tuple[str, ...] = "layout"
    cache_templates: bool = False  # Memoise template lookups (disables hot reload)

    # Dispatch
    needs_method: bool = False  # Every action must bind a method, views alone never match

    # Development
    debug: bool = False  # Re-raise action failures instead of answering 500
    log_level: str | None = None  # Applied to the "ganglion" logger when set
