"""Host probe for a corporate root CA certificate.

Corporate TLS-intercepting proxies (Zscaler) need their root certificate
trusted inside the container.  The probe looks for it in a fixed list of
host locations and copies the first match into the project, where
``setup-certificates.sh`` picks it up at post-create time.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from bootstrapper.errors import ProbeMiss
from bootstrapper.utils import copy_file, print_step, print_warning


class CertificateProbe:
    """Best-effort search-and-copy of a host certificate."""

    def __init__(self, candidates: Sequence[Path]) -> None:
        self.candidates = [Path(p) for p in candidates]

    def locate(self) -> Path:
        """Return the first readable candidate file.

        Raises:
            ProbeMiss: If none of the candidates is a readable file.
        """
        for candidate in self.candidates:
            if candidate.is_file() and os.access(candidate, os.R_OK):
                return candidate
        raise ProbeMiss(self.candidates)

    def install(self, dest: Path) -> Path | None:
        """Copy the located certificate to *dest*.

        A missing certificate is not fatal: an advisory is printed and
        ``None`` is returned.
        """
        try:
            source = self.locate()
        except ProbeMiss as exc:
            print_warning(f"  {exc}")
            print_warning(
                "  To add one later, copy your root CA to .devcontainer/certs/zscaler.crt"
            )
            return None

        copy_file(source, dest)
        print_step(f"Copied corporate certificate from {source}")
        return dest
