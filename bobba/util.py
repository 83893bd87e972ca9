# Credits: Bobba Research Team - 2026

import contextlib
import os


def hex_preview(data, limit: int = 32) -> str:
    head = bytes(data[:limit])
    text = " ".join("{:02x}".format(x) for x in head)
    if len(data) > limit:
        text += " ..."
    return text


def write_file_atomic(path: str, data) -> None:
    """Write through a temporary sibling so a half written file never takes the real name."""
    tmp_path = path + ".tmp"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.isfile(tmp_path):
            # Keep the original write error if the cleanup fails too
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
        raise
