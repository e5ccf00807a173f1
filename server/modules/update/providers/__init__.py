"""
Providers для Update Module
"""

from .update_server_provider import UpdateServerProvider
from .manifest_provider import ManifestProvider
from .artifact_provider import ArtifactProvider
from .version_provider import VersionProvider

__all__ = [
    'UpdateServerProvider',
    'ManifestProvider',
    'ArtifactProvider',
    'VersionProvider'
]
