"""Xcode project manifests, workspace registration and tree synchronisation."""

from podforge.manifest.sync import add_folder_to_manifest, sync_directory
from podforge.manifest.workspace import add_group_to_workspace
from podforge.manifest.xcode import XcodeGroup, XcodeManifest, XcodeTarget

__all__ = [
    "XcodeGroup",
    "XcodeManifest",
    "XcodeTarget",
    "add_folder_to_manifest",
    "add_group_to_workspace",
    "sync_directory",
]
