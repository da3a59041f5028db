from __future__ import annotations

from .corpus import char_boundaries, generate_diagnostics, generate_source_texts, snapshot_cases

__all__ = ["char_boundaries", "generate_diagnostics", "generate_source_texts", "snapshot_cases"]
