"""migro: scan and rewrite authorization attributes above controller actions.

The engine works on plain line sequences. Everything that touches the
filesystem, the terminal or CSV lives in `migro.io` and `migro.run`.
"""

from pathlib import Path

__version__ = "0.3.0"

package_dir = Path(__file__).resolve().parent

__all__ = ["__version__", "package_dir"]
