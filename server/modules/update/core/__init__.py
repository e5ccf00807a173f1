"""
Core компоненты Update Module
"""

from .types import UpdateStatus, FileDescriptor, ReleaseManifest, UpdateQuery, UpdateResult

__all__ = ['UpdateStatus', 'FileDescriptor', 'ReleaseManifest', 'UpdateQuery', 'UpdateResult']
