"""System package manager detection."""
import shutil
from typing import Callable, Optional

# Checked in order; the first one on PATH wins
PACKAGE_MANAGERS = ["apt", "dnf", "yum", "zypper", "pacman", "apk", "emerge"]

INSTALL_TEMPLATES = {
    "apt": "apt install {package}",
    "dnf": "dnf install {package}",
    "yum": "yum install {package}",
    "zypper": "zypper install {package}",
    "pacman": "pacman -S {package}",
    "apk": "apk add {package}",
    "emerge": "emerge {package}",
}


def detect_package_manager(which: Callable[[str], Optional[str]] = shutil.which) -> str:
    """Return the name of the system package manager, or 'unknown'."""
    for name in PACKAGE_MANAGERS:
        if which(name):
            return name
    return "unknown"


def suggest_install_command(
    package: str,
    manager: Optional[str] = None,
    escalation_command: Optional[str] = None,
) -> str:
    """Suggest an install command for package with the detected manager."""
    if manager is None:
        manager = detect_package_manager()
    if escalation_command is None:
        from checkpoint.core.config import get_config
        escalation_command = get_config().escalation_command

    template = INSTALL_TEMPLATES.get(manager)
    if template is None:
        return f"# Package manager not detected. Manual installation required for {package}"
    return f"{escalation_command} {template.format(package=package)}"
