"""Register a project inside an Xcode workspace (``contents.xcworkspacedata``)."""

from __future__ import annotations

import os
from pathlib import Path

from lxml import etree

from ..errors import ManifestError

WORKSPACE_DATA = "contents.xcworkspacedata"


def _location(project_path: Path, workspace_path: Path) -> str:
    relative = os.path.relpath(project_path, workspace_path.parent)
    return "group:" + Path(relative).as_posix()


def add_group_to_workspace(
    workspace_path: str | Path,
    group_name: str,
    project_path: str | Path,
) -> bool:
    """Add *project_path* to the workspace under a group named *group_name*.

    Returns:
        ``False`` if the workspace already references the project.

    Raises:
        ManifestError: If the workspace is missing or not valid XML.
    """
    workspace = Path(workspace_path)
    data_file = workspace / WORKSPACE_DATA
    if not data_file.is_file():
        raise ManifestError(f"Workspace not found: {workspace}", path=workspace)

    parser = etree.XMLParser(remove_blank_text=True)
    try:
        tree = etree.parse(str(data_file), parser)
    except etree.XMLSyntaxError as exc:
        raise ManifestError(f"Invalid workspace {data_file}: {exc}", path=data_file) from exc

    root = tree.getroot()
    location = _location(Path(project_path), workspace)
    if any(ref.get("location") == location for ref in root.iter("FileRef")):
        return False

    group = etree.SubElement(root, "Group", location="container:", name=group_name)
    etree.SubElement(group, "FileRef", location=location)
    tree.write(str(data_file), xml_declaration=True, encoding="UTF-8", pretty_print=True)
    return True
