"""Default collaborators performing the side effects of the catalog tools.

Every provider returns ``(output, exit_code)``; exceptions that escape are
turned into ``exit_code = -1`` results by the invoker.
"""

from . import downloads, files, process, web

__all__ = ["downloads", "files", "process", "web"]
