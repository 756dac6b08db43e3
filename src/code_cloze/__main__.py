"""Allow ``python -m code_cloze``."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
