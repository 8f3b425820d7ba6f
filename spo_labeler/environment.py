"""
Environment preparation.
Makes sure the client libraries the run depends on can be imported,
installing missing ones with pip.
"""
import importlib
import importlib.util
import logging
import subprocess
import sys
import warnings
from typing import Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# (import name, distribution name on the package index)
REQUIRED_MODULES: Tuple[Tuple[str, str], ...] = (
    ("msal", "msal"),
    ("requests", "requests"),
    ("dotenv", "python-dotenv"),
)


def pip_install(distribution: str) -> None:
    logger.info("Installing %s", distribution)
    proc = subprocess.run(
        [sys.executable, "-m", "pip", "install", distribution],
        capture_output=True, text=True, check=False,
    )
    if proc.returncode != 0:
        raise RuntimeError(f"pip install {distribution} failed: {proc.stderr.strip()[-500:]}")


def _import(import_name: str, disable_name_checking: bool) -> None:
    if not disable_name_checking:
        importlib.import_module(import_name)
        return
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        importlib.import_module(import_name)


def prepare_environment(requirements: Sequence[Tuple[str, str]] = REQUIRED_MODULES,
                        disable_name_checking: bool = True,
                        installer: Optional[Callable[[str], None]] = None) -> bool:
    """Import each required module, installing it first when it is missing.

    Faults are logged per module and do not stop the loop. Returns True only
    if every module ended up imported.
    """
    installer = installer or pip_install
    ready = True
    for import_name, distribution in requirements:
        try:
            if importlib.util.find_spec(import_name) is None:
                installer(distribution)
                importlib.invalidate_caches()
            _import(import_name, disable_name_checking)
            logger.debug("Module %s is available", import_name)
        except Exception as exc:
            logger.error("Could not prepare module %s: %s", import_name, exc)
            ready = False
    return ready
