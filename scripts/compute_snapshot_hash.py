from __future__ import annotations

import argparse
import hashlib
from pathlib import Path

from runic import Renderer
from runic.testing import snapshot_cases


SNAPSHOT = Path(__file__).resolve().parent.parent / "tests" / "snapshots" / "render_corpus.txt"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="compute_snapshot_hash")
    ap.add_argument("--write", action="store_true", help=f"rewrite {SNAPSHOT.name} with the current output")
    args = ap.parse_args(argv)

    h = hashlib.sha256()
    chunks: list[str] = []
    for src, diag in snapshot_cases():
        out = Renderer(src).render(diag)
        h.update(out.encode("utf-8"))
        h.update(b"\n---\n")
        chunks.append(out + "\n---\n")

    if args.write:
        SNAPSHOT.write_text("".join(chunks), encoding="utf-8")
    print(h.hexdigest())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
