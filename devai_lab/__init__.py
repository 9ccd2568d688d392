"""DevAI Lab - Python control plane.

Replaces the shell glue around the DevAI Lab container environment
(``scripts/generate-config.sh``, ``scripts/select-cuda-image.sh`` and
``scripts/push-image.sh``) with a structured Python package.
"""

try:
    from importlib.metadata import version

    __version__ = version("devai-lab")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
