"""FM operator engines, algorithm layouts, envelope geometry and theming for a DX7-style synthesizer."""

__version__ = "0.1.0"

__all__ = ["engine_mki", "engine_opl", "algo_layout", "envelope", "theme"]