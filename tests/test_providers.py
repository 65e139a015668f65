import shutil
from pathlib import Path
from typing import List
from unittest.mock import patch

import httpx
import pytest

from simple_llm_chat.chat_core.tools.providers import downloads, files, process, web


def test_read_file_reports_length_and_range(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("0123456789", encoding="utf-8")

    output, code = files.read_file(str(path), "", 8000)

    assert code == 0
    assert output == "File length = 10 characters, reading chars 0-9\n---\n0123456789"


def test_read_file_truncates_and_honours_offset(tmp_path: Path) -> None:
    path = tmp_path / "long.txt"
    path.write_text("abcdefghij", encoding="utf-8")

    head, _ = files.read_file(str(path), "0", 4)
    middle, _ = files.read_file(str(path), "4", 4)
    tail, _ = files.read_file(str(path), "8", 4)

    assert head.endswith("---\nabcd\n...[truncated]\n")
    assert "reading chars 4-7" in middle and middle.endswith("efgh\n...[truncated]\n")
    assert tail.endswith("---\nij")


def test_read_file_edge_cases(tmp_path: Path) -> None:
    empty = tmp_path / "empty.txt"
    empty.write_text("", encoding="utf-8")
    short = tmp_path / "short.txt"
    short.write_text("abc", encoding="utf-8")

    assert files.read_file(str(tmp_path / "missing.txt"), "", 10)[1] == 1
    assert files.read_file(str(empty), "", 10) == ("File length = 0 characters.", 0)
    assert files.read_file(str(short), "not a number", 10)[0].endswith("---\nabc")
    assert files.read_file(str(short), "3", 10)[1] == 1


def test_read_file_expands_environment_variables(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "env.txt").write_text("from env", encoding="utf-8")
    monkeypatch.setenv("CHAT_TEST_DIR", str(tmp_path))

    output, code = files.read_file("$CHAT_TEST_DIR/env.txt", "", 100)

    assert code == 0
    assert output.endswith("from env")


def test_write_file_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "out.txt"

    output, code = files.write_file(str(target), "héllo")

    assert code == 0
    assert target.read_text(encoding="utf-8") == "héllo"
    assert str(target) in output


def test_move_and_copy_refuse_to_overwrite(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    source.write_text("data", encoding="utf-8")
    existing = tmp_path / "existing.txt"
    existing.write_text("keep", encoding="utf-8")

    assert files.copy_file(str(source), str(existing))[1] == 1
    assert files.move_file(str(source), str(existing))[1] == 1
    assert existing.read_text(encoding="utf-8") == "keep"

    assert files.copy_file(str(source), str(tmp_path / "copy" / "c.txt"))[1] == 0
    assert files.move_file(str(source), str(tmp_path / "moved" / "m.txt"))[1] == 0
    assert not source.exists()
    assert (tmp_path / "copy" / "c.txt").read_text(encoding="utf-8") == "data"
    assert (tmp_path / "moved" / "m.txt").read_text(encoding="utf-8") == "data"
    assert files.move_file(str(source), str(tmp_path / "again.txt"))[1] == 1


def test_delete_file(tmp_path: Path) -> None:
    target = tmp_path / "gone.txt"
    target.write_text("x", encoding="utf-8")

    assert files.delete_file(str(target))[1] == 0
    assert not target.exists()
    assert files.delete_file(str(target))[1] == 1


def test_list_directory(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "file.bin").write_bytes(b"x" * 2048)

    output, code = files.list_directory(str(tmp_path))

    assert code == 0
    assert "Directories:\n  [DIR]  sub" in output
    assert "Files:\n  [FILE] file.bin (2 KB)" in output
    assert files.list_directory(str(tmp_path / "missing"))[1] == 1


def test_list_empty_directory(tmp_path: Path) -> None:
    output, _ = files.list_directory(str(tmp_path))

    assert "Directory is empty." in output


def test_extract_zip_archive(tmp_path: Path) -> None:
    payload = tmp_path / "payload"
    payload.mkdir()
    (payload / "inner.txt").write_text("inside", encoding="utf-8")
    archive = shutil.make_archive(str(tmp_path / "bundle"), "zip", root_dir=payload)

    output, code = files.extract_file(archive, str(tmp_path / "out"))

    assert code == 0
    assert (tmp_path / "out" / "inner.txt").read_text(encoding="utf-8") == "inside"
    assert files.extract_file(str(tmp_path / "none.zip"), str(tmp_path / "out"))[1] == 1


def test_extract_unsupported_archive(tmp_path: Path) -> None:
    bogus = tmp_path / "notes.unknown"
    bogus.write_text("plain text", encoding="utf-8")

    assert files.extract_file(str(bogus), str(tmp_path / "out"))[1] == 1


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 B"), (512, "512 B"), (1536, "1.5 KB"), (1048576, "1 MB"), (5 * 1024**4, "5 TB")],
)
def test_format_file_size(size: int, expected: str) -> None:
    assert files.format_file_size(size) == expected


def test_shell_command_captures_output_and_exit_code() -> None:
    output, code = process.run_shell_command("echo shell-output && exit 3")

    assert "shell-output" in output
    assert code == 3


def test_python_script_runs_with_current_interpreter() -> None:
    output, code = process.run_python_script("import sys\nprint('from script')\nsys.stderr.write('warn')\n")

    assert code == 0
    assert "from script" in output
    assert "warn" in output


def test_python_script_removes_temporary_file() -> None:
    output, _ = process.run_python_script("print(__file__)")
    script = Path(output.strip())

    assert script.name.startswith("temp_script_")
    assert not script.exists()


def html_client(routes: dict) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        for prefix, response in routes.items():
            if str(request.url).startswith(prefix):
                return response(request) if callable(response) else response
        return httpx.Response(404)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_strip_html_keeps_text_links_and_images() -> None:
    markup = """
    <html><head><title>t</title><script>var x = 1;</script></head>
    <body><nav>menu</nav><div class="c"><p>Hello <b>world</b></p>
    <a href="https://example.com" class="x">link</a><img alt="i" src="pic.png"></div></body></html>
    """

    text = web.strip_html(markup)

    assert "var x" not in text and "menu" not in text
    assert "Hello world" in text
    assert '<a href="https://example.com">link' in text
    assert '<img src="pic.png">' in text


def test_read_website_truncates_content() -> None:
    client = html_client({"https://site.test": httpx.Response(200, text="<p>" + "a" * 50 + "</p>")})

    output, code = web.read_website("https://site.test/page", 10, client=client)

    assert code == 0
    assert output == "a" * 10 + "\n"


def test_read_website_http_error() -> None:
    client = html_client({"https://site.test": httpx.Response(503)})

    output, code = web.read_website("https://site.test/page", 10, client=client)

    assert code == 1
    assert "503" in output


def test_web_search_falls_back_from_failing_searxng_to_duckduckgo() -> None:
    ddg = (
        '<div><a class="result__snippet" href="//duckduckgo.com/l/?uddg=https%3A%2F%2Fpython.org%2F&rut=x">'
        "The <b>Python</b> language</a></div>"
    )
    requested: List[str] = []

    def record(response: httpx.Response):
        def _respond(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.host)
            return response

        return _respond

    client = html_client(
        {
            "https://searx.test": record(httpx.Response(500)),
            "https://duckduckgo.com": record(httpx.Response(200, text=ddg)),
        }
    )

    output, code = web.web_search("python", "https://searx.test", client=client)

    assert code == 0
    assert output == "https://python.org/ : The Python language"
    assert requested == ["searx.test", "duckduckgo.com"]


def test_web_search_uses_searxng_results() -> None:
    results = {"results": [{"url": "https://a.test", "title": "A", "content": "first"}]}
    client = html_client({"https://searx.test": httpx.Response(200, json=results)})

    output, code = web.web_search("a", "https://searx.test", client=client)

    assert (output, code) == ("https://a.test : A - first", 0)


def test_web_search_skips_backends_with_unexpected_json() -> None:
    client = html_client(
        {
            "https://searx.test": httpx.Response(200, json=[1, 2]),
            "https://duckduckgo.com": httpx.Response(200, text="<html></html>"),
            "https://wiby.me": httpx.Response(
                200, json=["junk", {"URL": "https://w.test", "Title": "W", "Snippet": "s"}]
            ),
        }
    )

    output, code = web.web_search("a", "https://searx.test", client=client)

    assert (output, code) == ("https://w.test : W - s", 0)


def test_web_search_reports_failure_when_every_backend_is_malformed() -> None:
    client = html_client(
        {
            "https://duckduckgo.com": httpx.Response(200, text="<html></html>"),
            "https://wiby.me": httpx.Response(200, json={"oops": True}),
        }
    )

    assert web.web_search("a", client=client) == ("No results found.", -1)


def test_web_search_without_results() -> None:
    client = html_client(
        {
            "https://duckduckgo.com": httpx.Response(200, text="<html></html>"),
            "https://wiby.me": httpx.Response(200, json=[]),
        }
    )

    assert web.web_search("nothing", client=client) == ("No results found.", 0)


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("photo.png", "image/png", True),
        ("photo.png", "image/jpeg", True),
        ("photo.png", "text/html; charset=utf-8", False),
        ("archive.zip", "application/octet-stream", True),
        ("data.unknownext", "text/html", True),
    ],
)
def test_content_type_matches(filename: str, content_type: str, expected: bool) -> None:
    assert downloads.content_type_matches(filename, content_type) is expected


def test_download_file_streams_to_disk(tmp_path: Path) -> None:
    client = html_client(
        {
            "https://files.test": lambda request: httpx.Response(
                200, content=b"PK\x03\x04", headers={"content-type": "application/zip"}
            )
        }
    )
    target = tmp_path / "nested" / "file.zip"

    output, code = downloads.download_file(str(target), "https://files.test/file.zip", client=client)

    assert code == 0
    assert target.read_bytes() == b"PK\x03\x04"
    assert "Content-Type: application/zip" in output


def test_download_file_rejects_mismatched_type(tmp_path: Path) -> None:
    client = html_client(
        {
            "https://files.test": lambda request: httpx.Response(
                200, text="<html>login</html>", headers={"content-type": "text/html"}
            )
        }
    )
    target = tmp_path / "image.png"

    output, code = downloads.download_file(str(target), "https://files.test/image.png", client=client)

    assert code == 1
    assert output.startswith("File type mismatch")
    assert not target.exists()


def test_download_video_requires_yt_dlp() -> None:
    with patch("simple_llm_chat.chat_core.tools.providers.downloads.shutil.which", return_value=None):
        assert downloads.download_video("https://video.test/v") == ("yt-dlp was not found on PATH.", -1)


def test_download_video_runs_yt_dlp(tmp_path: Path) -> None:
    with patch("simple_llm_chat.chat_core.tools.providers.downloads.shutil.which", return_value="/usr/bin/yt-dlp"), patch(
        "simple_llm_chat.chat_core.tools.providers.downloads.execute_process", return_value=("saved", 0)
    ) as run:
        output, code = downloads.download_video("https://video.test/v", output_dir=tmp_path)

    assert code == 0
    assert str(tmp_path) in output
    command = run.call_args.args[0]
    assert command[0] == "/usr/bin/yt-dlp"
    assert command[-1] == "https://video.test/v"
