"""
L0 Data — Release assets and library→package mapping.

Static tables only. No I/O, no imports from other installer layers.
"""

from __future__ import annotations

# ── Release assets ──────────────────────────────────────────────
#
# (os, arch) → (strategy kind, asset file-name template).
# ``{version}`` is filled in from the installer config.

ASSET_TABLE: dict[tuple[str, str], tuple[str, str | None]] = {
    ("windows", "x64"):  ("zip", "audiowaveform-{version}-win64.zip"),
    ("windows", "ia32"): ("zip", "audiowaveform-{version}-win32.zip"),
    ("linux", "x64"):    ("deb", "audiowaveform_{version}-1-13_amd64.deb"),
    ("linux", "arm64"):  ("deb", "audiowaveform_{version}-1-13_arm64.deb"),
    ("darwin", "arm64"): ("homebrew", None),
    ("darwin", "x64"):   ("homebrew", None),
}

# Display order for "supported targets" messages
SUPPORTED_TARGETS: dict[str, list[str]] = {
    "darwin": ["arm64", "x64"],
    "linux": ["arm64", "x64"],
    "windows": ["x64", "ia32"],
}

# ── Platform normalisation ──────────────────────────────────────

OS_ALIASES: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "windows": "windows",
    "win32": "windows",
}

ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "ia32": "ia32",
}

# ── Archive layout ──────────────────────────────────────────────

ZIP_BINARY_PATTERN = "**/audiowaveform.exe"
DEB_DATA_PATTERN = "data.tar.*"
DEB_BINARY_PATH = ("usr", "bin", "audiowaveform")

HOMEBREW_FORMULA = "audiowaveform"

# ── Shared-library → Debian package ─────────────────────────────
#
# Keys are library-name prefixes as printed by ``ldd``; the longest
# matching prefix wins. Packages target the Debian 13 build the
# ``-1-13`` assets are made for.

LIBRARY_PACKAGES: dict[str, str] = {
    "libboost_program_options": "libboost-program-options1.83.0",
    "libboost_filesystem": "libboost-filesystem1.83.0",
    "libboost_regex": "libboost-regex1.83.0",
    "libboost_system": "libboost-system1.83.0",
    "libsndfile.so": "libsndfile1",
    "libmad.so": "libmad0",
    "libid3tag.so": "libid3tag0",
    "libgd.so": "libgd3",
    "libpng16.so": "libpng16-16t64",
    "libjpeg.so": "libjpeg62-turbo",
    "libfreetype.so": "libfreetype6",
    "libfontconfig.so": "libfontconfig1",
    "libz.so": "zlib1g",
    "libFLAC.so": "libflac14",
    "libvorbis.so": "libvorbis0a",
    "libvorbisenc.so": "libvorbisenc2",
    "libogg.so": "libogg0",
    "libopus.so": "libopus0",
    "libmpg123.so": "libmpg123-0t64",
    "libmp3lame.so": "libmp3lame0",
    "libstdc++.so": "libstdc++6",
    "libgcc_s.so": "libgcc-s1",
}

PACKAGE_MANAGER_UPDATE = ["update"]
PACKAGE_MANAGER_INSTALL = ["install", "-y"]
