"""Editor preferences."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EditorSettings:
    """User-facing editor settings with their defaults."""

    wime_directory: str = ""
    last_opened_file: str = ""
    auto_save: bool = True
    show_debug_info: bool = False
    window_width: int = 1280
    window_height: int = 720
    window_maximized: bool = True