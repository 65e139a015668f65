"""The fixed catalog of tools the model may call, bound to the default providers."""

from __future__ import annotations

from typing import Dict, List

from ..config import ChatConfig
from .models import ToolDefinition, ToolParameter
from .providers import downloads, files, process, web
from .registry import ToolRegistry

_ENV_HINT = "Supports environment variables like $HOME and ~."

TOOL_NAMES: List[str] = [
    "run_shell_command",
    "run_web_search",
    "read_website",
    "download_video",
    "download_file",
    "read_file",
    "write_file",
    "extract_file",
    "move_file",
    "copy_file",
    "delete_file",
    "list_directory",
    "run_python_script",
]


def _param(description: str) -> ToolParameter:
    return ToolParameter(type="string", description=description)


def _path(description: str) -> ToolParameter:
    return _param(f"{description} {_ENV_HINT}")


def build_default_registry(config: ChatConfig) -> ToolRegistry:
    """Create a registry holding every catalog tool.

    Args:
        config: Runtime configuration; supplies the content cap and the search instance.

    Returns:
        A registry with all thirteen catalog tools registered.
    """
    limit = config.max_content_length
    registry = ToolRegistry()

    def add(
        name: str,
        description: str,
        parameters: Dict[str, ToolParameter],
        required: List[str],
        func,
        label,
    ) -> None:
        registry.register(
            ToolDefinition(
                name=name,
                description=description,
                parameters=parameters,
                required=required,
                func=func,
                label=label,
            )
        )

    add(
        "run_shell_command",
        "Execute a shell command on the host system and return its output.",
        {"command": _param("Full command line to execute. Keep it short and avoid interactive programs.")},
        ["command"],
        lambda a: process.run_shell_command(a["command"]),
        lambda a: a["command"],
    )
    add(
        "run_web_search",
        "Search the web and return a list of URLs with brief snippets. "
        "If more detail is needed, URLs can be read with read_website.",
        {"query": _param("The search query to look up on the web.")},
        ["query"],
        lambda a: web.web_search(a["query"], config.searxng_instance),
        lambda a: f"web search: {a['query']}",
    )
    add(
        "read_website",
        "Browse to a specific URL/web page and return its HTML content.",
        {"URL": _param("The URL of the web page to get the content of.")},
        ["URL"],
        lambda a: web.read_website(a["URL"], limit),
        lambda a: f"read website: {a['URL']}",
    )
    add(
        "download_video",
        "Download an online video using yt-dlp to the user's desktop, returning yt-dlp's output.",
        {"URL": _param("The URL of the video to download.")},
        ["URL"],
        lambda a: downloads.download_video(a["URL"]),
        lambda a: f"download video: {a['URL']}",
    )
    add(
        "download_file",
        "Downloads a file from the internet and saves it to the provided location.",
        {
            "filename": _path("The full path of the file to write to."),
            "URL": _param("The URL of the file to download."),
        },
        ["filename", "URL"],
        lambda a: downloads.download_file(a["filename"], a["URL"]),
        lambda a: f"download file: {a['URL']}",
    )
    add(
        "read_file",
        f"Read the contents of a local file and return it as a string. Always reads up to {limit} characters. "
        "Use the offset parameter to read different parts of large files.",
        {
            "filename": _path("The full path of the file to read."),
            "offset": _param(
                f"Optional. Character offset to start reading from (default: 0). For example, offset {limit} "
                f"reads characters {limit}-{limit * 2}."
            ),
        },
        ["filename"],
        lambda a: files.read_file(a["filename"], a.get("offset", ""), limit),
        lambda a: f"read file: {a['filename']}",
    )
    add(
        "write_file",
        "Write the given content to a local file, creating or overwriting it.",
        {
            "filename": _path("The full path of the file to write to."),
            "content": _param("The content to write into the file."),
        },
        ["filename", "content"],
        lambda a: files.write_file(a["filename"], a["content"]),
        lambda a: f"write file: {a['filename']}",
    )
    add(
        "extract_file",
        "Extract an archive file (zip, tar, tar.gz, tar.bz2, tar.xz) to a specified destination directory.",
        {
            "archive_path": _path("The full path of the archive file to extract."),
            "destination_path": _path(
                "The full path of the destination directory. It will be created if it doesn't exist."
            ),
        },
        ["archive_path", "destination_path"],
        lambda a: files.extract_file(a["archive_path"], a["destination_path"]),
        lambda a: f"extract file: {a['archive_path']}",
    )
    add(
        "move_file",
        "Move or rename a file from one location to another. "
        "Destination directory will be created if it doesn't exist.",
        {
            "source_path": _path("The full path of the file to move."),
            "destination_path": _path("The full path where the file should be moved to."),
        },
        ["source_path", "destination_path"],
        lambda a: files.move_file(a["source_path"], a["destination_path"]),
        lambda a: f"move file: {a['source_path']}",
    )
    add(
        "copy_file",
        "Copy a file from one location to another. Destination directory will be created if it doesn't exist.",
        {
            "source_path": _path("The full path of the file to copy."),
            "destination_path": _path("The full path where the file should be copied to."),
        },
        ["source_path", "destination_path"],
        lambda a: files.copy_file(a["source_path"], a["destination_path"]),
        lambda a: f"copy file: {a['source_path']}",
    )
    add(
        "delete_file",
        "Delete a file from the file system. Use with caution as this operation cannot be undone.",
        {"file_path": _path("The full path of the file to delete.")},
        ["file_path"],
        lambda a: files.delete_file(a["file_path"]),
        lambda a: f"delete file: {a['file_path']}",
    )
    add(
        "list_directory",
        "List all files and subdirectories in a given directory.",
        {"directory_path": _path("The full path of the directory to list.")},
        ["directory_path"],
        lambda a: files.list_directory(a["directory_path"]),
        lambda a: f"list directory: {a['directory_path']}",
    )
    add(
        "run_python_script",
        "Run a Python script with the local interpreter and return its combined stdout and stderr.",
        {"script_content": _param("The complete source code of the Python script to run.")},
        ["script_content"],
        lambda a: process.run_python_script(a["script_content"]),
        lambda a: "run python script",
    )
    return registry
