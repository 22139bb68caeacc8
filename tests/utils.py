"""Helpers for building and reading zip fixtures."""
import io
import os
import zipfile

MODULE = "mymodule"
ENTRY_ACTIVITY = "com.unity3d.player.UnityPlayerActivity"


def zip_bytes(entries):
    """Build a zip in memory; a value of None makes a directory entry."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as z:
        for name, content in entries.items():
            if content is None:
                z.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), b"")
            else:
                info = zipfile.ZipInfo(name)
                info.external_attr = 0o644 << 16
                z.writestr(info, content)
    return buf.getvalue()


def write_zip(path, entries):
    os.makedirs(os.path.dirname(str(path)), exist_ok=True)
    with open(path, "wb") as f:
        f.write(zip_bytes(entries))
    return str(path)


def zip_contents(path):
    with zipfile.ZipFile(path) as z:
        return {name: z.read(name) for name in z.namelist() if not name.endswith("/")}
