"""Udagram service toolkit: shared pieces of the image filter and users services."""

from .processor import BaseProcessor, StatelessAction
from .api import create_app, ServiceConfig
from .direct import delete_local_files, fetch_url_bytes, render_file, run_blocking
from .security import CredentialManager, TokenIssuer
from .auth import require_auth

__version__ = "1.0.0"


__all__ = [
    "BaseProcessor",
    "StatelessAction",
    "create_app",
    "ServiceConfig",
    "delete_local_files",
    "fetch_url_bytes",
    "render_file",
    "run_blocking",
    "CredentialManager",
    "TokenIssuer",
    "require_auth",
]
