"""Output directory and file management utilities."""
import io
import os
import zipfile
from typing import Dict, Optional


def create_output_directory(base_path: str, project_name: str) -> str:
    """
    Create the output directory for a project's G-code files.

    Args:
        base_path: Base output directory path
        project_name: Sanitized project name

    Returns:
        Full path to the created directory
    """
    directory = os.path.join(base_path, project_name)
    os.makedirs(directory, exist_ok=True)
    return directory


def write_gcode_file(directory: str, name: str, content: str) -> str:
    """
    Write a G-code program.

    Args:
        directory: Output directory
        name: File name without extension
        content: G-code content

    Returns:
        Full path to the written file
    """
    file_path = os.path.join(directory, f"{name}.gcode")
    with open(file_path, 'w') as f:
        f.write(content)
    return file_path


def read_gcode_file(file_path: str) -> Optional[str]:
    """
    Read a G-code file.

    Args:
        file_path: Path to the G-code file

    Returns:
        File content as string, or None if file doesn't exist
    """
    if not os.path.exists(file_path):
        return None

    with open(file_path, 'r') as f:
        return f.read()


def package_for_download(files: Dict[str, str]) -> bytes:
    """
    Create a zip archive from in-memory files.

    Args:
        files: Mapping of archive name to text content

    Returns:
        Bytes of the zip archive
    """
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
        for arcname, content in files.items():
            zf.writestr(arcname, content)

    buffer.seek(0)
    return buffer.read()
